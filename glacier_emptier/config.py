"""config: Provide config, defaults and logging setup
"""
import collections
import configparser
import os
import logging
import logging.handlers

import boto3
import botocore.exceptions

from glacier_emptier.errors import ConfigurationError


BASE_DIR = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))
CONFIG_PATH = os.path.join(BASE_DIR, 'config.ini')

DEFAULT_REGION = 'us-east-1'
# '-' means the account owning the credentials
DEFAULT_ACCOUNT_ID = '-'
DEFAULT_LOG_LEVEL = 'INFO'

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s'


RunConfig = collections.namedtuple('RunConfig', ['vault', 'region', 'profile', 'account_id'])


def read_config_file(config_path=CONFIG_PATH):
    """read_config_file(): Read config.ini, a missing file gives empty sections.

    Returns a tuple (config_env, config_glacier) of dicts.
    """
    config = configparser.ConfigParser()
    try:
        config.read(config_path)
    except (configparser.Error, UnicodeDecodeError) as exception:
        raise ConfigurationError('invalid config file {}: {}'.format(config_path, exception)) from exception

    config_env = dict(config.items('env')) if config.has_section('env') else {}
    config_glacier = dict(config.items('glacier')) if config.has_section('glacier') else {}

    return config_env, config_glacier


def build_run_config(vault, region=None, profile=None, account_id=None, config_glacier=None):
    """build_run_config(): Merge command line values, config.ini values and defaults.

    A value given explicitly wins over config.ini, which wins over the defaults.
    Without a profile, boto3 looks for credentials in its default chain
    (environment variables first, then the shared files).
    """
    config_glacier = config_glacier or {}

    if not vault:
        raise ConfigurationError('--vault must be set')

    return RunConfig(
        vault=vault,
        region=region or config_glacier.get('region_name') or DEFAULT_REGION,
        profile=profile or config_glacier.get('profile_name') or None,
        account_id=account_id or config_glacier.get('account_id') or DEFAULT_ACCOUNT_ID,
    )


def build_session(run_config):
    """build_session(): Load credentials for the configured profile and region.

    Raises ConfigurationError when the profile does not exist or has no credentials.
    """
    try:
        session = boto3.session.Session(
            profile_name=run_config.profile,
            region_name=run_config.region,
        )
        credentials = session.get_credentials()
    except botocore.exceptions.BotoCoreError as exception:
        raise ConfigurationError('unable to load config: {}'.format(exception)) from exception

    if credentials is None:
        raise ConfigurationError('unable to load config: no credentials found for profile {}'.format(run_config.profile or '(default chain)'))

    return session


def configure_logging(config_env=None, verbose=False):
    """configure_logging(): Log to the console and, with log_path set, to a file rotated at midnight.

    Raises ConfigurationError on an unknown log_level or a log_path that cannot be opened.
    Nothing is installed in that case.
    """
    config_env = config_env or {}

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = []

    stream_level = logging.DEBUG if verbose else config_env.get('log_level', DEFAULT_LOG_LEVEL).upper()
    stream_handler = logging.StreamHandler()
    try:
        stream_handler.setLevel(stream_level)
    except ValueError as exception:
        raise ConfigurationError('invalid log_level: {}'.format(exception)) from exception
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    if config_env.get('log_path'):
        try:
            file_handler = logging.handlers.TimedRotatingFileHandler(
                filename=config_env['log_path'], when='midnight', backupCount=0)
        except OSError as exception:
            raise ConfigurationError('unable to open log_path: {}'.format(exception)) from exception
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    for handler in handlers:
        logger.addHandler(handler)

    # botocore is very chatty at DEBUG
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
