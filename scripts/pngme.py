#!/usr/bin/env python3
'''
Hide/retrieve secret messages inside the chunks of a PNG file.

 $ pngme.py encode image.png ruSt "this is a secret"
 $ pngme.py decode image.png ruSt
'''
import logging
import os
import sys

from pngstash import commands
from pngstash.exceptions import PNGStashException


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'''usage: {progname} encode <png file> <chunk type> <message> [<output file>]
       {progname} decode <png file> <chunk type>
       {progname} remove <png file> <chunk type>
       {progname} print <png file>''')
    sys.exit(1)


def do_encode(path, chunk_type, message, out_path=None):
    commands.encode(path, chunk_type, message, out_path=out_path)
    print('encode ok')


def do_decode(path, chunk_type):
    message = commands.decode(path, chunk_type)

    if message is None:
        print(f'no such message for chunk type: {chunk_type}')
    else:
        print(f'secret message for {chunk_type} is: {message}')


def do_remove(path, chunk_type):
    commands.remove(path, chunk_type)
    print(f'removed chunk type: {chunk_type}')


def do_print(path):
    chunk_types = commands.print_chunks(path)

    print(f'all chunk types ({len(chunk_types)}):')
    for idx, chunk_type in enumerate(chunk_types):
        print(f'[{idx:02d}] {chunk_type}')


# name -> (function, min number of arguments, max number of arguments)
COMMANDS = {
    'encode': (do_encode, 3, 4),
    'decode': (do_decode, 2, 2),
    'remove': (do_remove, 2, 2),
    'print':  (do_print, 1, 1),
}


if __name__ == '__main__':
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        usage(sys.argv[0])

    command, min_args, max_args = COMMANDS[sys.argv[1]]
    args = sys.argv[2:]

    if not min_args <= len(args) <= max_args:
        usage(sys.argv[0])

    try:
        command(*args)
    except PNGStashException as e:
        logger.debug('failed with kind %s', e.kind.name)
        print(f'error: {e}', file=sys.stderr)
        sys.exit(1)
