"""Loads configurations from .yaml files and expands environment variables.
"""
import os

import toolz as tz
import yaml

from rnaquant import utils


class ConfigurationError(ValueError):
    """Invalid input source, options or data shape, detected before a tool runs.
    """
    pass


class CmdNotFound(ConfigurationError):
    pass

# ## Retrieval functions

def load_system_config(config_file=None):
    """Load the system YAML configuration, falling back to an empty configuration.
    """
    config = load_config(config_file) if config_file else {"resources": {}}
    if "algorithm" not in config:
        config["algorithm"] = {}
    config["system_config"] = config_file
    return config, config_file

def load_config(config_file):
    """Load YAML config file, replacing environmental variables.
    """
    if not os.path.isfile(config_file):
        raise ConfigurationError("Could not find input system configuration file %s" % config_file)
    try:
        with open(config_file) as in_handle:
            config = yaml.safe_load(in_handle) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError("Could not parse configuration file %s: %s" % (config_file, e))
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file %s must contain a mapping" % config_file)
    config = _expand_paths(config)
    if 'resources' not in config:
        config['resources'] = {}
    # lowercase resource names, the preferred way to specify, for back-compatibility
    newr = {}
    for k, v in config["resources"].items():
        if k.lower() != k:
            newr[k.lower()] = v
    config["resources"].update(newr)
    return config

def _expand_paths(config):
    for field, setting in config.items():
        if isinstance(config[field], dict):
            config[field] = _expand_paths(config[field])
        else:
            config[field] = expand_path(setting)
    return config

def expand_path(path):
    """ Combines os.path.expandvars with replacing ~ with $HOME.
    """
    try:
        return os.path.expandvars(path.replace("~", "$HOME"))
    except AttributeError:
        return path

def get_resources(name, config):
    """Retrieve resources for a program, pulling from multiple config sources.
    """
    return tz.get_in(["resources", name], config,
                     tz.get_in(["resources", "default"], config, {}))

def get_program(name, config, default=None):
    """Retrieve the command for a program from the configuration.

    Programs are specified in `resources` as either a plain string or a
    dictionary with a `cmd` key. Unconfigured programs resolve through the
    PATH, or are returned as given so that a missing tool fails when it is
    invoked.
    """
    pconfig = tz.get_in(["resources", name], config)
    if pconfig is None:
        program = default or name
    elif isinstance(pconfig, str):
        program = pconfig
    elif "cmd" in pconfig:
        program = pconfig["cmd"]
    else:
        program = default or name
    program = expand_path(program)
    if os.path.dirname(program):
        if not os.path.isfile(program):
            raise CmdNotFound("Configured program for %s not found: %s" % (name, program))
        return program
    return utils.which(program) or program

def get_program_options(name, config):
    """Extra commandline options configured for a program.
    """
    resources = get_resources(name, config)
    if not isinstance(resources, dict):
        return []
    opts = resources.get("options", [])
    if not isinstance(opts, (list, tuple)):
        opts = str(opts).split()
    return [str(x) for x in opts]
