#!/usr/bin/env python3

''' Single pass structural validation of FASTA data. Each record must
start with a ">" header carrying a unique identifier and be followed by
at least one sequence character. Sequence lines may only contain ASCII
letters.
'''

import sys, logging, re, enum

HEADER_MARKER = '>'

# Anything that is not an ASCII letter or a line terminator.
INVALID_SEQUENCE = re.compile('[^A-Za-z\r\n]')


class Classification(enum.Enum):

    ''' Outcome of one validation run. '''

    VALID = 'valid'
    MISSING_HEADER = 'missing_header'
    DUPLICATE_ID = 'duplicate_id'
    INVALID_CHARACTER = 'invalid_character'
    EMPTY_SEQUENCE = 'empty_sequence'
    INTERNAL_ERROR = 'internal_error'


EXIT_CODES = {
    Classification.VALID : 0,
    Classification.MISSING_HEADER : 1,
    Classification.DUPLICATE_ID : 2,
    Classification.INVALID_CHARACTER : 4,
    Classification.EMPTY_SEQUENCE : 8,
    Classification.INTERNAL_ERROR : 255}


def exit_code(classification):

    ''' Translate a classification into a process exit status. '''

    return EXIT_CODES[classification]


def is_clean(line):

    ''' Return True if line contains only ASCII letters. Carriage returns
    and line feeds are ignored wherever they appear. '''

    if not line:
        raise ValueError('Empty line received.')
    return INVALID_SEQUENCE.search(line) is None


class IdentifierRegistry:

    ''' Record identifiers seen during a single validation run. '''

    def __init__(self):
        self._seen = set()

    def __len__(self):
        return len(self._seen)

    def __contains__(self, identifier):
        return identifier in self._seen

    def insert_if_absent(self, identifier):

        ''' Add identifier to the registry. Return True if it was
        already present, in which case nothing changes. '''

        if identifier in self._seen:
            return True
        self._seen.add(identifier)
        return False

    def reset(self):
        self._seen.clear()


def get_identifier(line):

    ''' Header text after the marker up to the first space. '''

    return line[1:].rstrip('\r\n').split(' ', 1)[0]


def validate(lines, verbose = False, registry = None):

    ''' Scan lines once and return the Classification of the first
    fault found, or Classification.VALID. Diagnostics for faults are
    logged only if verbose. '''

    fun_name = sys._getframe().f_code.co_name
    log = logging.getLogger(f'{__name__}.{fun_name}')

    def fault(classification, msg):
        if verbose:
            log.error(msg)
        return classification

    try:
        if registry is None:
            registry = IdentifierRegistry()
        else:
            registry.reset()

        first_line = True
        sequence_length = 0
        residues = 0
        for index, line in enumerate(lines, 1):
            if line.startswith(HEADER_MARKER):
                if not first_line and sequence_length == 0:
                    return fault(Classification.EMPTY_SEQUENCE,
                        f'Record ending before line {index} has an empty sequence.')
                first_line = False
                residues += sequence_length
                sequence_length = 0
                identifier = get_identifier(line)
                if registry.insert_if_absent(identifier):
                    return fault(Classification.DUPLICATE_ID,
                        f'Duplicate identifier |{identifier}| on line {index}.')
            else:
                if first_line:
                    return fault(Classification.MISSING_HEADER,
                        f'Line {index} precedes the first "{HEADER_MARKER}" header.')
                sequence = line.rstrip('\r\n')
                if not sequence:
                    continue
                if not is_clean(sequence):
                    invalid = INVALID_SEQUENCE.search(sequence).group(0)
                    return fault(Classification.INVALID_CHARACTER,
                        f'Invalid sequence character {invalid!r} on line {index}.')
                sequence_length += len(sequence) - sequence.count('\r')
    except MemoryError:
        log.critical('Unable to track record identifiers.')
        return Classification.INTERNAL_ERROR

    if sequence_length == 0:
        return fault(Classification.EMPTY_SEQUENCE,
            'Input ended with an empty sequence.')

    residues += sequence_length
    log.debug(f'Checked {len(registry)} records ({residues} residues).')
    return Classification.VALID
