"""
# pngstash: hide messages inside PNG files.

A PNG file is a signature followed by a list of chunks, each one with its own
type, length and CRC: adding a chunk with a private type doesn't change how the
image is rendered, so it's a nice place where to stash a (short) secret.

The chunks are described declaratively as classes of fields, in a
Django-models-like fashion; two basic operations are defined for each
component:

 1. unpack(): reading the binary data and build a high-level representation
    of that; the chunk itself knows how many bytes needs to read.

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): recalculate offsets and sizes of the subcomponents so that
    packing writes each one in the correct place. Packing implies a
    relayouting unless indicated explicitly.

All the errors are subclasses of exceptions.PNGStashException and carry an
ErrorKind.
"""
