import argparse
import logging

from commands import (
    init, add, commit, log, config,
    cat_file, hash_object, ls_files
)
# The main entry point for the kit object store
def main(argv=None):
    # The main parser
    parser = argparse.ArgumentParser(prog="kit", description="kit: a minimal content-addressable object store in git's on-disk format.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug logging to stderr.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: init
    init_parser = subparsers.add_parser("init", help="Initialize a new, empty repository.")
    init_parser.set_defaults(func=init.run)

    # Command: cat-file
    cat_file_parser = subparsers.add_parser("cat-file", help="Print the content of a stored object.")
    cat_file_parser.add_argument("hash", help="The object hash.")
    cat_file_parser.set_defaults(func=cat_file.run)

    # Command: hash-object
    hash_object_parser = subparsers.add_parser("hash-object", help="Compute the blob hash of a file.")
    hash_object_parser.add_argument("-w", dest="write", action="store_true", help="Also write the blob into the object store.")
    hash_object_parser.add_argument("file", help="The file to hash.")
    hash_object_parser.set_defaults(func=hash_object.run)

    # Command: add
    add_parser = subparsers.add_parser("add", help="Add file contents to the index.")
    add_parser.add_argument("files", nargs="+", help="Files to add.")
    add_parser.set_defaults(func=add.run)

    # Command: commit
    commit_parser = subparsers.add_parser("commit", help="Record the staged files as a new commit.")
    commit_parser.add_argument("text", nargs="?", metavar="message", help="Commit message.")
    commit_parser.add_argument("-m", "--message", help="Commit message (same as the positional form).")
    commit_parser.set_defaults(func=commit.run)

    # Command: ls-files
    ls_files_parser = subparsers.add_parser("ls-files", help="Show the files in the index.")
    ls_files_parser.add_argument("-s", "--stage", action="store_true", help="Show mode and object hash too.")
    ls_files_parser.set_defaults(func=ls_files.run)

    # Command: log
    log_parser = subparsers.add_parser("log", help="Show commit logs.")
    log_parser.set_defaults(func=log.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Set user name and email.")
    config_parser.add_argument("key", help="The configuration key (e.g., user.name).")
    config_parser.add_argument("value", help="The configuration value.")
    config_parser.set_defaults(func=config.run)

    # Parse the arguments
    args = parser.parse_args(argv)

    if args.command == "commit":
        if args.message is not None and args.text is not None:
            commit_parser.error("give the message either positionally or with -m, not both")
        if args.message is None:
            if args.text is None:
                commit_parser.error("a commit message is required")
            args.message = args.text

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Run the selected command
    args.func(args)

if __name__ == "__main__":
    main()
