from pathlib import Path

TEST_FILE_DIR = Path(__file__).parent / "test_files"

VCARD = "BEGIN:VCARD\nFN:John Doe\nEMAIL;TYPE=WORK:john@example.com\nEND:VCARD\n"


def get_test_file(file_name: str) -> str:
    """Helper function to open and read test files."""
    filepath = TEST_FILE_DIR / file_name
    with open(filepath, "r", encoding="utf-8") as f:
        text = f.read()
    return text


def unfold(text: str) -> str:
    """Join folded physical lines back into logical lines."""
    return text.replace("\n ", "")
