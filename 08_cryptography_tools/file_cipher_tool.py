import argparse
import sys
from concurrent.futures import ThreadPoolExecutor
from itertools import repeat
from pathlib import Path
from colorama import init, Fore
from tqdm import tqdm

from line_cipher import (
    InvalidKeyError,
    check_key,
    block_size,
    rotate_amount,
    encrypt_line,
    decrypt_line,
)

# colorama for colorized output
init(autoreset=True)
GREEN, RED, CYAN, YELLOW = Fore.GREEN, Fore.RED, Fore.CYAN, Fore.YELLOW

# line terminator written after every output line
NEWLINE = b"\n"

# only the trailing newline is removed, a \r stays part of the line
def strip_newline(raw):
    return raw[:-1] if raw.endswith(NEWLINE) else raw

# function that checks whether both names point at the same file
def same_file(in_path, out_path):
    return Path(in_path).resolve() == Path(out_path).resolve()

# prints the parameters the key derives, useful when comparing with another implementation
def describe_key(key):
    print(CYAN + f"|*| Key length {len(key)}, block size {block_size(key)}, rotation {rotate_amount(key)}")

# function that pushes every line through the cipher and writes it out in input order
def transform_stream(fin, fout, key, transform, threads=1, quiet=False):
    lines = (strip_newline(raw) for raw in fin)
    desc = "Encrypting" if transform is encrypt_line else "Decrypting"
    count = 0

    if threads > 1:
        # lines are independent, map keeps them in order
        lines = list(lines)
        with ThreadPoolExecutor(max_workers=threads) as executor:
            results = executor.map(transform, lines, repeat(key))
            for out in tqdm(results, total=len(lines), desc=desc, unit="line", disable=quiet):
                fout.write(out + NEWLINE)
                count += 1
    else:
        for line in tqdm(lines, desc=desc, unit="line", disable=quiet):
            fout.write(transform(line, key) + NEWLINE)
            count += 1

    return count

# main file function, returns True when the output file was fully written
def process_file(in_path, out_path, key, encrypt=True, threads=1, quiet=False, verbose=False):
    if same_file(in_path, out_path):
        print(RED + "|x| Input and output file names must differ.")
        return False

    try:
        key = check_key(key)
    except InvalidKeyError as e:
        print(RED + f"|x| {e}")
        return False

    if verbose:
        describe_key(key)

    transform = encrypt_line if encrypt else decrypt_line

    try:
        fin = open(in_path, "rb")
    except OSError as e:
        print(RED + f"|x| Failed to open input file: {in_path} ({e.strerror})")
        return False

    with fin:
        try:
            fout = open(out_path, "wb")
        except OSError as e:
            print(RED + f"|x| Failed to create output file: {out_path} ({e.strerror})")
            return False
        with fout:
            count = transform_stream(fin, fout, key, transform, threads=threads, quiet=quiet)

    if not quiet:
        action = "Encrypted" if encrypt else "Decrypted"
        print(GREEN + f"|+| {action} {count} line(s) from {in_path} into {out_path}")
    return True

# function that runs the cipher over a string, line by line, only ascii text round trips through a str
def transform_text(text, key, encrypt=True):
    key = check_key(key)
    if not text.isascii():
        raise ValueError("Text mode only accepts ASCII text, use --infile for other content.")
    transform = encrypt_line if encrypt else decrypt_line
    out = [transform(line.encode("ascii"), key) for line in text.split("\n")]
    return b"\n".join(out).decode("ascii")

# the menu driven flow: choose mode, then file names and key
def interactive_menu():
    print("=== Simple File Encrypt/Decrypt ===")
    print("1) Encrypt a file")
    print("2) Decrypt a file")

    try:
        choice = int(input("Choose: ").strip())
    except (ValueError, EOFError):
        return 0

    try:
        in_file = input("Enter input file name: ")
        out_file = input("Enter output file name: ")
        key = input("Enter key (string): ")
    except EOFError:
        print(RED + "|x| Input ended before all fields were entered.")
        return 1

    if choice not in (1, 2):
        print(RED + "|x| Invalid choice.")
        return 1

    ok = process_file(in_file, out_file, key, encrypt=(choice == 1))
    print("Done." if ok else "Failed.")
    return 0 if ok else 1

# arg parser for cli customizability
def main(argv=None):
    parser = argparse.ArgumentParser(description="Keyed Line Cipher - File Encrypt/Decrypt Tool")
    parser.add_argument("mode", nargs="?", choices=["encrypt", "decrypt"], help="Mode (encrypt/decrypt)")
    parser.add_argument("--infile", help="Input text file (processed line by line)")
    parser.add_argument("--outfile", help="Output file, must differ from the input")
    parser.add_argument("-t", "--text", help="Text to process instead of a file")
    parser.add_argument("-k", "--key", help="Key (non-empty string)")
    parser.add_argument("--threads", type=int, default=1, help="Number of threads to use (default: 1)")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress and status output")
    parser.add_argument("--verbose", action="store_true", help="Print the block size and rotation derived from the key")
    parser.add_argument("-i", "--interactive", action="store_true", help="Run the interactive menu")
    if argv is None:
        argv = sys.argv[1:]
    args = parser.parse_args(argv)

    if args.interactive or not argv:
        return interactive_menu()

    if args.mode is None:
        parser.error("mode (encrypt/decrypt) is required")
    if args.key is None:
        parser.error("a key is required (-k/--key)")
    if args.threads < 1:
        parser.error("--threads must be at least 1")
    if args.infile and args.text:
        parser.error("use either --infile or --text, not both")

    encrypt = args.mode == "encrypt"

    if args.text is not None:
        if args.outfile:
            print(YELLOW + "|!| --outfile is ignored in text mode, the result is printed")
        try:
            res = transform_text(args.text, args.key, encrypt=encrypt)
        except ValueError as e:
            print(RED + f"|x| {e}")
            return 1
        if args.verbose:
            describe_key(check_key(args.key))
        print(f"\n|*| Result:\n{res}\n")
        return 0

    if not args.infile:
        parser.error("--infile or --text is required")
    if not args.outfile:
        parser.error("--infile requires --outfile")

    ok = process_file(
        args.infile, args.outfile, args.key, encrypt=encrypt,
        threads=args.threads, quiet=args.quiet, verbose=args.verbose,
    )
    return 0 if ok else 1

if __name__ == "__main__":
    sys.exit(main())
