import os
import subprocess
import sys

import pytest

from pngstash import commands
from pngstash.exceptions import (
    ChunkNotFound,
    IOFailure,
    InvalidChunkType,
    InvalidSignature,
)
from pngstash.images.png import PNGFile


def test_encode_decode(image_path, image_png):
    chunk = commands.encode(image_path, 'ruSt', 'meet me at midnight')

    assert str(chunk.type.value) == 'ruSt'
    assert image_path.read_bytes() == image_png + chunk.pack()
    assert commands.decode(image_path, 'ruSt') == 'meet me at midnight'
    assert commands.decode(image_path, 'miSs') is None


def test_encode_to_another_file(image_path, image_png, tmp_path):
    out_path = tmp_path / 'out.png'

    commands.encode(image_path, 'ruSt', 'ciao', out_path=out_path)

    assert image_path.read_bytes() == image_png
    assert PNGFile(out_path).find_text('ruSt') == 'ciao'


def test_encode_invalid_type_leaves_file_alone(image_path, image_png):
    with pytest.raises(InvalidChunkType):
        commands.encode(image_path, 'ru5t', 'ciao')

    assert image_path.read_bytes() == image_png


def test_remove(image_path, image_png):
    commands.encode(image_path, 'ruSt', 'ciao')

    removed = commands.remove(image_path, 'ruSt')

    assert removed.data.value == b'ciao'
    assert image_path.read_bytes() == image_png

    with pytest.raises(ChunkNotFound):
        commands.remove(image_path, 'ruSt')


def test_print_chunks(image_path):
    commands.encode(image_path, 'ruSt', 'ciao')

    chunk_types = commands.print_chunks(image_path)

    assert chunk_types[0] == 'IHDR'
    assert chunk_types[-2:] == ['IEND', 'ruSt']


def test_not_a_png(tmp_path):
    path = tmp_path / 'text.txt'
    path.write_text('this is not an image')

    with pytest.raises(InvalidSignature):
        commands.decode(path, 'ruSt')


def test_io_failures(tmp_path, image_path):
    with pytest.raises(IOFailure):
        commands.decode(tmp_path / 'missing.png', 'ruSt')

    with pytest.raises(IOFailure):
        commands.encode(image_path, 'ruSt', 'ciao', out_path=tmp_path / 'missing' / 'out.png')


def run_script(test_root_dir, *args):
    root = (test_root_dir / '..').resolve()
    script = root / 'scripts' / 'pngme.py'
    env = dict(os.environ, PYTHONPATH=os.pathsep.join([str(root), os.environ.get('PYTHONPATH', '')]))

    return subprocess.run(
        [sys.executable, str(script)] + [str(_) for _ in args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_script(test_root_dir, image_path):
    result = run_script(test_root_dir, 'encode', image_path, 'ruSt', 'hidden')
    assert result.returncode == 0
    assert 'encode ok' in result.stdout

    result = run_script(test_root_dir, 'decode', image_path, 'ruSt')
    assert result.returncode == 0
    assert 'secret message for ruSt is: hidden' in result.stdout

    result = run_script(test_root_dir, 'print', image_path)
    assert result.returncode == 0
    assert '[00] IHDR' in result.stdout

    result = run_script(test_root_dir, 'remove', image_path, 'ruSt')
    assert result.returncode == 0

    result = run_script(test_root_dir, 'decode', image_path, 'ruSt')
    assert 'no such message' in result.stdout


def test_script_errors(test_root_dir, image_path):
    result = run_script(test_root_dir, 'remove', image_path, 'ruSt')
    assert result.returncode == 1
    assert 'error:' in result.stderr

    result = run_script(test_root_dir, 'decode')
    assert result.returncode == 1
    assert 'usage:' in result.stdout

    result = run_script(test_root_dir, 'whatever', image_path)
    assert result.returncode == 1
