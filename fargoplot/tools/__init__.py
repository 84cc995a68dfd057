from .reformat import convert, convert_extension, read_records, write_records
from .script import Stream, build
