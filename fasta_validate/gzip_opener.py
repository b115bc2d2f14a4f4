#!/usr/bin/env python3

"""
Context manager for reading plain or GZIP compressed text input from
files or stdin, plus a bounded line reader.
"""

import os, sys, io, logging, gzip, contextlib, binascii, stat

# Longest line (in characters, including the terminator) read_lines accepts.
MAX_LINE_LENGTH = 1024 * 1024

# Every byte decodes to exactly one code point.
ENCODING = 'latin-1'

# Split lines on \n only, a lone \r stays inside its line.
NEWLINE = '\n'

class LineLengthError(ValueError):
    pass

def is_gzip(filepath):

    ''' Check for GZIP magic number byte header. '''

    with open(filepath, 'rb') as f:
        return binascii.hexlify(f.read(2)) == b'1f8b'

def named_pipe(path):

    """ Check if file is a named pipe. """

    return stat.S_ISFIFO(os.stat(path).st_mode)

def stdin_is_gzip():

    ''' Peek at stdin for the GZIP magic number without consuming it. '''

    return binascii.hexlify(sys.stdin.buffer.peek(2)[:2]) == b'1f8b'

@contextlib.contextmanager
def gzip_read(path = '-', gunzip = False):

    ''' Yield a text file object for path ('-' for stdin). Paths ending
    in '.gz' are decompressed if they hold GZIP data. Named pipes cannot
    be checked without consuming them so a '.gz' pipe is assumed to be
    compressed. '''

    fun_name = sys._getframe().f_code.co_name
    log = logging.getLogger(f'{__name__}.{fun_name}')

    if not gunzip:
        if path == '-':
            gunzip = stdin_is_gzip()
        elif path.endswith('.gz'):
            gunzip = named_pipe(path) or is_gzip(path)
        if gunzip:
            log.info(f'Input {path} detected as gzipped. Decompressing...')

    if path == '-':
        if gunzip:
            fobj = gzip.open(
                sys.stdin.buffer, mode = 'rt',
                encoding = ENCODING, newline = NEWLINE)
        else:
            fobj = io.TextIOWrapper(
                sys.stdin.buffer, encoding = ENCODING, newline = NEWLINE)
    elif gunzip:
        fobj = gzip.open(
            path, mode = 'rt', encoding = ENCODING, newline = NEWLINE)
    else:
        fobj = open(
            path, mode = 'rt', encoding = ENCODING, newline = NEWLINE)
    try:
        yield fobj
    finally:
        if path != '-' or gunzip:
            # GzipFile does not close a file object it was handed.
            fobj.close()
        else:
            # Leave sys.stdin.buffer open.
            fobj.detach()

def read_lines(fobj, max_length = MAX_LINE_LENGTH):

    ''' Yield lines from fobj, raising LineLengthError on any line longer
    than max_length characters. '''

    while True:
        line = fobj.readline(max_length + 1)
        if not line:
            return
        if len(line) > max_length:
            raise LineLengthError(
                f'Line exceeds maximum length of {max_length} characters.')
        yield line
