from .config import get_buffer, logger, set_verbose
from .constants import Character, Delimiter
from .converter import lowercase, to_vname
from .funcs import ENCODING, ERRORS, escape_undecodable, indent_str, open_input, open_output, rejoin_utf8, split_by_size
