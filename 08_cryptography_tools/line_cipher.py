import argparse

# printable ascii alphabet used by the substitution stage (space..~)
PRINTABLE_MIN = 32
PRINTABLE_MAX = 126
ALPHABET_SIZE = PRINTABLE_MAX - PRINTABLE_MIN + 1

# block sizes run from MIN_BLOCK to MIN_BLOCK + BLOCK_SPAN - 1 (3..9)
MIN_BLOCK = 3
BLOCK_SPAN = 7


# raised by the calling layer when the key would be empty
class InvalidKeyError(ValueError):
    pass

# function that normalizes a key to bytes and rejects an empty or non text one
def check_key(key):
    if isinstance(key, str):
        key = key.encode("utf-8")
    elif isinstance(key, (bytes, bytearray)):
        key = bytes(key)
    else:
        raise InvalidKeyError(f"Key must be str or bytes, not {type(key).__name__}.")
    if not key:
        raise InvalidKeyError("Key must not be empty.")
    return key

# returns true for the byte values the substitution stage transforms, 127 is not one of them
def is_printable(value):
    return PRINTABLE_MIN <= value <= PRINTABLE_MAX

# function that shifts a printable value around the 95 symbol alphabet, others pass through
def shift_printable(value, shift):
    if not is_printable(value):
        return value
    # python's % already lands in [0, 95) for negative shifts
    return (value - PRINTABLE_MIN + shift) % ALPHABET_SIZE + PRINTABLE_MIN

# per offset shift, mixes the key byte with the absolute position in the line
def key_shift(key, i):
    return (key[i % len(key)] + i) % ALPHABET_SIZE

def substitute_encrypt(line, key):
    return bytes(shift_printable(c, key_shift(key, i)) for i, c in enumerate(line))

def substitute_decrypt(line, key):
    return bytes(shift_printable(c, -key_shift(key, i)) for i, c in enumerate(line))

# block size derived from key length, always within 3..9
def block_size(key):
    return len(key) % BLOCK_SPAN + MIN_BLOCK

# rotation used on odd blocks
def rotate_amount(key):
    return sum(key) % block_size(key)

# reverses buf[start:start + length] in place
def reverse_block(buf, start, length):
    a, b = start, start + length - 1
    while a < b:
        buf[a], buf[b] = buf[b], buf[a]
        a += 1
        b -= 1

# function that rotates a block right by r in place using three reversals
def rotate_right(buf, start, length, r):
    if length == 0:
        return
    r %= length
    if r == 0:
        return
    reverse_block(buf, start, length)
    reverse_block(buf, start, r)
    reverse_block(buf, start + r, length - r)

# walks the line block by block and hands each (index, start, length) to the caller
def iter_blocks(total, size):
    for j, start in enumerate(range(0, total, size)):
        yield j, start, min(size, total - start)

def transpose_encrypt(line, key):
    if not line:
        return bytes(line)
    b = block_size(key)
    r = rotate_amount(key)
    buf = bytearray(line)
    for j, start, length in iter_blocks(len(buf), b):
        if j % 2 == 0:
            reverse_block(buf, start, length)
        else:
            rotate_right(buf, start, length, r)
    return bytes(buf)

# same block boundaries as encryption, reversal undoes itself and the rotation is undone by its complement
def transpose_decrypt(line, key):
    if not line:
        return bytes(line)
    b = block_size(key)
    r = rotate_amount(key)
    buf = bytearray(line)
    for j, start, length in iter_blocks(len(buf), b):
        if j % 2 == 0:
            reverse_block(buf, start, length)
        else:
            rotate_right(buf, start, length, length - (r % length))
    return bytes(buf)

# full pipeline: substitution first, then transposition
def encrypt_line(line, key):
    return transpose_encrypt(substitute_encrypt(line, key), key)

# inverse pipeline: undo transposition, then substitution
def decrypt_line(line, key):
    return substitute_decrypt(transpose_decrypt(line, key), key)

def encrypt_lines(lines, key):
    for line in lines:
        yield encrypt_line(line, key)

def decrypt_lines(lines, key):
    for line in lines:
        yield decrypt_line(line, key)

# arg parser for quick single line checks
def main():
    parser = argparse.ArgumentParser(description="Keyed line cipher (single line)")
    parser.add_argument("mode", choices=["encrypt", "decrypt"], help="Mode (encrypt/decrypt)")
    parser.add_argument("text", help="Line to transform")
    parser.add_argument("-k", "--key", required=True, help="Key (non-empty string)")
    args = parser.parse_args()

    try:
        key = check_key(args.key)
    except InvalidKeyError as e:
        parser.error(str(e))

    if not args.text.isascii():
        parser.error("only ASCII text can be transformed from the command line")

    line = args.text.encode("ascii")
    out = encrypt_line(line, key) if args.mode == "encrypt" else decrypt_line(line, key)
    print(out.decode("ascii"))

if __name__ == "__main__":
    main()
