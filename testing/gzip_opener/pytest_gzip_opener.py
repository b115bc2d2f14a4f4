#!/usr/bin/env python3

import io, os, sys, gzip, threading, pytest

from fasta_validate.gzip_opener import *

FASTA = '>seq1 first\nACGT\n>seq2\nTTGCA\n'

@pytest.fixture
def plain_file(tmp_path):
    path = tmp_path / 'test.fa'
    path.write_text(FASTA)
    return str(path)

@pytest.fixture
def gzip_file(tmp_path):
    path = tmp_path / 'test.fa.gz'
    with gzip.open(path, 'wt') as f:
        f.write(FASTA)
    return str(path)

def test_is_gzip(plain_file, gzip_file):
    assert is_gzip(gzip_file)
    assert not is_gzip(plain_file)

def test_named_pipe(plain_file):
    assert not named_pipe(plain_file)

def test_read_plain(plain_file):
    with gzip_read(plain_file) as f:
        assert f.read() == FASTA
    assert f.closed

def test_read_gzip_by_suffix(gzip_file):
    with gzip_read(gzip_file) as f:
        assert f.read() == FASTA
    assert f.closed

def test_gz_suffix_without_gzip_data(tmp_path):
    path = tmp_path / 'plain.fa.gz'
    path.write_text(FASTA)
    with gzip_read(str(path)) as f:
        assert f.read() == FASTA

def test_force_gunzip(tmp_path):
    path = tmp_path / 'compressed.fa'
    with gzip.open(path, 'wt') as f:
        f.write(FASTA)
    with gzip_read(str(path), gunzip = True) as f:
        assert f.read() == FASTA

def test_gzip_magic_without_suffix_read_plain(tmp_path):
    path = tmp_path / 'compressed.fa'
    with gzip.open(path, 'wt') as f:
        f.write(FASTA)
    with gzip_read(str(path)) as f:
        assert f.read() != FASTA

def test_non_ascii_bytes_decode(tmp_path):
    path = tmp_path / 'binary.fa'
    path.write_bytes(b'>a\nAC\xff\xfeGT\n')
    with gzip_read(str(path)) as f:
        assert f.read() == '>a\nAC\xff\xfeGT\n'

def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        with gzip_read(str(tmp_path / 'missing.fa')) as f:
            pass

def test_missing_gz_file(tmp_path):
    with pytest.raises(OSError):
        with gzip_read(str(tmp_path / 'missing.fa.gz')) as f:
            pass

def test_read_lines():
    assert list(read_lines(io.StringIO(FASTA))) == [
        '>seq1 first\n', 'ACGT\n', '>seq2\n', 'TTGCA\n']

def test_read_lines_without_trailing_newline():
    assert list(read_lines(io.StringIO('>a\nAC'))) == ['>a\n', 'AC']

def test_read_lines_at_limit():
    assert list(read_lines(io.StringIO('ACGT\n'), max_length = 5)) == ['ACGT\n']

def test_read_lines_too_long():
    lines = read_lines(io.StringIO('>a\nACGTACGT\n'), max_length = 5)
    assert next(lines) == '>a\n'
    with pytest.raises(LineLengthError):
        next(lines)

def stdin_from(monkeypatch, data):
    stdin = io.TextIOWrapper(io.BufferedReader(io.BytesIO(data)))
    monkeypatch.setattr(sys, 'stdin', stdin)
    return stdin

def test_read_stdin(monkeypatch):
    stdin = stdin_from(monkeypatch, FASTA.encode())
    assert not stdin_is_gzip()
    with gzip_read('-') as f:
        assert f.read() == FASTA
    assert not stdin.buffer.closed

def test_read_gzip_stdin(monkeypatch):
    stdin = stdin_from(monkeypatch, gzip.compress(FASTA.encode()))
    assert stdin_is_gzip()
    with gzip_read('-') as f:
        assert f.read() == FASTA
    assert f.closed
    assert not stdin.buffer.closed

def test_lone_carriage_return_kept(tmp_path, monkeypatch):
    data = b'>a\nAC\r>b\nGT\r\n'
    lines = ['>a\n', 'AC\r>b\n', 'GT\r\n']
    path = tmp_path / 'test.fa'
    path.write_bytes(data)
    with gzip_read(str(path)) as f:
        assert list(read_lines(f)) == lines
    gz_path = tmp_path / 'test.fa.gz'
    gz_path.write_bytes(gzip.compress(data))
    with gzip_read(str(gz_path)) as f:
        assert list(read_lines(f)) == lines
    stdin_from(monkeypatch, data)
    with gzip_read('-') as f:
        assert list(read_lines(f)) == lines

@pytest.mark.skipif(not hasattr(os, 'mkfifo'), reason = 'requires named pipes')
def test_named_pipe_gz_is_decompressed(tmp_path):
    path = str(tmp_path / 'pipe.fa.gz')
    os.mkfifo(path)
    assert named_pipe(path)

    def write():
        with open(path, 'wb') as f:
            f.write(gzip.compress(FASTA.encode()))

    writer = threading.Thread(target = write)
    writer.start()
    try:
        with gzip_read(path) as f:
            assert f.read() == FASTA
    finally:
        writer.join()
