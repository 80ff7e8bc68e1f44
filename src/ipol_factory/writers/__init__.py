"""Reading and writing of ipol files."""

from .ipol_writer import format_ipol_document, read_ipol_file, write_ipol_file

__all__ = ["format_ipol_document", "read_ipol_file", "write_ipol_file"]
