from __future__ import annotations

HEADER_SIZE = 16  # bytes on the wire, always
HEADER_DIGITS = HEADER_SIZE - 1  # last byte is NUL slack
MAX_FILE_SIZE = 10**HEADER_DIGITS - 1

BUFSIZE = 4096

DEFAULT_SOURCE_PATH = "./1MB_file"
DEFAULT_OUTPUT_DIR = "./received_files"
FILE_PREFIX = "file_"
FILE_EXTENSION = ".dat"
FILE_NUMBER_WIDTH = 3

# sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_UNAVAILABLE = 69
