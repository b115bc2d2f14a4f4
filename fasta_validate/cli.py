#!/usr/bin/env python3


''' Check that FASTA files are well formed. Every record needs a ">"
header with a unique identifier (the text up to the first space) and at
least one sequence line containing only the letters A-Z and a-z. Input
ending in ".gz" is decompressed. The result is reported as the exit
status.
'''

import argparse, sys, logging, zlib

from fasta_validate import __version__
from fasta_validate.exception_logger import handle_exception
from fasta_validate.gzip_opener import (
    gzip_read, read_lines, LineLengthError, MAX_LINE_LENGTH)
from fasta_validate.validate_fasta import (
    validate, exit_code, IdentifierRegistry)

# Exit status for input that cannot be opened or decoded.
UNREADABLE = 1

EPILOG = '''exit status:
  0    the input is a valid FASTA file
  1    the first line does not start with ">" or the input is unreadable
  2    the record identifiers are not unique
  4    a sequence line contains a character other than A-Z and a-z
  8    a record has a zero length sequence
  255  internal error
'''

class HelpFormatter(
        argparse.ArgumentDefaultsHelpFormatter,
        argparse.RawDescriptionHelpFormatter):
    pass

class ArgumentParser(argparse.ArgumentParser):

    ''' Usage errors exit with status 1, status 2 means duplicate
    identifiers. '''

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f'{self.prog}: error: {message}\n')

def _args(argv = None):

    def positive_int(value):

        ''' Custom argparse type to force positive integer. '''

        ivalue = int(value)
        if ivalue <= 0:
            raise argparse.ArgumentTypeError(
                f'{value} is not a positive integer.')
        return ivalue

    parser = ArgumentParser(
        prog = 'fasta_validate',
        description = __doc__,
        epilog = EPILOG,
        formatter_class = HelpFormatter)
    parser.add_argument(
        'infiles', nargs = '*', default = ['-'],
        help = 'Specify input FASTA files.')
    parser.add_argument(
        '-d', '--gunzip', action = 'store_true',
        help = 'Uncompress GZIP input regardless of file name.')
    parser.add_argument(
        '-m', '--max-line-length', default = MAX_LINE_LENGTH,
        type = positive_int,
        help = 'Longest input line accepted.')
    parser.add_argument(
        '-l', '--logfile', nargs = '?', default = None,
        help = 'Specify log file name')
    parser.add_argument(
        '-v', '--verbose', action = 'store_true',
        help = 'Report why a file failed validation.')
    parser.add_argument(
        '-V', '--version', action = 'version',
        version = f'%(prog)s {__version__}')

    args = parser.parse_args(argv)

    if args.infiles == ['-'] and sys.stdin.isatty():
        sys.stderr.write(f'Error: No input provided.\n\n')
        parser.print_help()
        sys.exit(1)

    return vars(args)

def validate_file(
        path, verbose = False, gunzip = False,
        max_line_length = MAX_LINE_LENGTH, registry = None):

    ''' Validate a single file and return its exit status. '''

    fun_name = sys._getframe().f_code.co_name
    log = logging.getLogger(f'{__name__}.{fun_name}')

    try:
        with gzip_read(path, gunzip) as fobj:
            lines = read_lines(fobj, max_line_length)
            classification = validate(lines, verbose, registry)
    except (OSError, EOFError, zlib.error, LineLengthError) as e:
        if verbose:
            log.error(f'Unable to read {path}: {e}')
        return UNREADABLE

    log.info(f'{path}: {classification.value}')
    return exit_code(classification)

def main(infiles, logfile, verbose, gunzip, max_line_length):

    ''' Validate each infile in turn. Return the exit status of the first
    file that failed, or 0. '''

    fun_name = sys._getframe().f_code.co_name
    log = logging.getLogger(f'{__name__}.{fun_name}')

    status = 0
    registry = IdentifierRegistry()
    for infile in infiles:
        log.debug(f'Validating {infile}.')
        ec = validate_file(
            infile, verbose, gunzip, max_line_length, registry)
        if ec and not status:
            status = ec
    return status

def run(argv = None):
    try:
        args = _args(argv)
        sys.excepthook = handle_exception
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        log_level = logging.DEBUG if args['verbose'] else None
        if args['logfile'] == '-':
            (logging.basicConfig(
                stream = sys.stdout,
                format = log_format,
                level = log_level))
        else:
            (logging.basicConfig(
                filename = args['logfile'],
                format = log_format,
                level = log_level))
        sys.exit(main(**args))
    finally:
        logging.shutdown()

if __name__ == '__main__':
    run()
