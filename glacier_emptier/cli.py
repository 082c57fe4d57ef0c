"""cli: Command line entry point

    python -m glacier_emptier.cli --vault my-vault [--region us-east-1] [--profile default]

Exits with status 1 on any fatal error, 0 once every archive was processed,
even if some deletions failed.
"""

import argparse
import logging
import signal
import sys

from glacier_emptier.config import CONFIG_PATH, DEFAULT_REGION, build_run_config, configure_logging, read_config_file
from glacier_emptier.empty_vault import CancelToken, empty_vault
from glacier_emptier.errors import EmptierError
from glacier_emptier.glacier import GlacierStorage


def build_parser():
    parser = argparse.ArgumentParser(
        description='Delete every archive of an AWS Glacier vault, using its latest completed inventory.')
    parser.add_argument('--vault', default='', help='Vault name to empty')
    parser.add_argument('--region', default=None, help='AWS region (default: {})'.format(DEFAULT_REGION))
    parser.add_argument('--profile', default=None, help='AWS shared config profile name (default: environment credentials, then the default profile)')
    parser.add_argument('--config', default=CONFIG_PATH, help='Path of config.ini')
    parser.add_argument('--timeout', type=float, default=None, help='Give up after this many seconds')
    parser.add_argument('--verbose', action='store_true', help='Log debug messages on the console')
    return parser


def main(argv=None, storage_factory=GlacierStorage.from_config):
    """main(): Run the command line, return the process exit status.

    storage_factory: builds the storage from a RunConfig
    """
    args = build_parser().parse_args(argv)

    cancel = CancelToken(timeout=args.timeout)
    # Ctrl-C lets the current call finish, then the run stops
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.cancel())
    try:
        config_env, config_glacier = read_config_file(args.config)
        configure_logging(config_env, verbose=args.verbose)
        run_config = build_run_config(
            vault=args.vault,
            region=args.region,
            profile=args.profile,
            config_glacier=config_glacier,
        )
        storage = storage_factory(run_config)
        empty_vault(storage, run_config.vault, cancel=cancel)
    except EmptierError as exception:
        # Before configure_logging succeeded, this goes to stderr through basicConfig
        logging.error(exception)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    return 0


if __name__ == '__main__':
    sys.exit(main())
