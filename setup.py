"""
vobjtool: module and tools for reading, splitting and querying vCard and vCalendar files

Description
-----------

Parses iCalendar and vCard files into a tree of components and content lines,
joining folded lines on input and folding them again on output. Components can
be duplicated, detached and attached, which the bundled tools use to split a
calendar into one calendar per event, copying the timezones each event needs.

Requirements
------------

Requires python 3.8 or later and dateutil 2.7.0 or later.

Tools
-----
    - votool: cat, split or summarise ical/vcard files
    - icalsplit: split ical files into files with 1 single element
    - vcardquery: search vCards, usable as Mutt query command
"""

from setuptools import setup, find_packages

doclines = (__doc__ or '').splitlines()

setup(name = "vobjtool",
      version = "1.0.0",
      license = "GPLv3",
      zip_safe = True,
      entry_points = {
            'console_scripts': [
                  'votool = vobjtool.votool:main',
                  'icalsplit = vobjtool.icalsplit:main',
                  'vcardquery = vobjtool.vcard_query:main'
            ]
      },
      include_package_data = True,
      python_requires = ">=3.8",
      install_requires = ["python-dateutil >= 2.7.0"],
      extras_require = {"test": ["pytest"]},
      platforms = ["any"],
      packages = find_packages(exclude=["tests", "tests.*"]),
      description = "Parse, fold, split and query iCalendar and vCard files",
      long_description = "\n".join(doclines[2:]),
      keywords = ['vobject', 'icalendar', 'vcard', 'ics', 'vcf'],
      classifiers =  """
      Development Status :: 4 - Beta
      Environment :: Console
      Intended Audience :: Developers
      License :: OSI Approved :: GNU General Public License v3 (GPLv3)
      Natural Language :: English
      Operating System :: OS Independent
      Programming Language :: Python
      Programming Language :: Python :: 3
      Topic :: Text Processing""".strip().splitlines()
      )
