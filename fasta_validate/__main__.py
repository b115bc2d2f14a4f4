from fasta_validate.cli import run

run()
