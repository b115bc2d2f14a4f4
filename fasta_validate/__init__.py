''' Structural validation of FASTA files. '''

__version__ = '0.1.0'
