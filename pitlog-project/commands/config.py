# The command: pitlog config <key> <value>
# What it does: Sets a configuration key-value pair (e.g., log.limit or log.renameThreshold)
# How it does: It acts as a simple dispatcher, passing the key and value to the `write_config` function in the `utils/config.py` module, which handles the file I/O and parsing logic. `log.*` values are checked before they are written so a typo cannot break every later `pitlog log`
# What data structure it uses: None directly, but it provides the interface to the underlying Map / Dictionary structure managed by `utils/config.py`

import sys
from utils import config as config_utils

INTEGER_KEYS = {'log.limit', 'log.renamethreshold'}

def run(args):
    try: # Set the configuration key-value pair
        if args.key.lower() in INTEGER_KEYS and not args.value.isdigit():
            raise ValueError(f"{args.key} must be a non-negative integer")
        config_utils.write_config(args.key, args.value)
        print(f"Set {args.key} to '{args.value}'")
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
