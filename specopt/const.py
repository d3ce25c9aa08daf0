import os

VERSION = (0, 3, 1)
VERSION_STR = f"{VERSION[0]}.{VERSION[1]}.{VERSION[2]}{'-' +  str(VERSION[-1]) if len(VERSION) > 3 else ''}"


ARGV0 = "specopt"
DESCRIPTION = "Generate command line option parsers from their --help text"
GLOBAL_DIR = os.path.join(os.path.expanduser("~"), ".specopt")
CACHE_DIR = os.path.join(GLOBAL_DIR, "cache")
LOG_FILE = os.path.join(GLOBAL_DIR, "specopt.log")
EXTRA_ARGS_ENV = "SPECOPT_EXTRA_ARGS"
