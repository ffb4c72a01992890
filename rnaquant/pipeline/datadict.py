"""
functions to access the configuration dictionary in a clearer way
"""

import toolz as tz

LOOKUPS = {
    "num_cores": {"keys": ["algorithm", "num_cores"], "default": 1},
    "transcriptome_index": {"keys": ["reference", "transcriptome_index"]},
    "fragment_length": {"keys": ["algorithm", "fragment_length"], "default": 200},
    "fragment_sd": {"keys": ["algorithm", "fragment_sd"], "default": 20},
    "bootstraps": {"keys": ["algorithm", "bootstraps"], "default": 30},
    "quant_bias": {"keys": ["algorithm", "bias"], "default": True},
    "condition_keyword": {"keys": ["algorithm", "condition", "keyword"],
                          "default": "control"},
    "control_label": {"keys": ["algorithm", "condition", "control"],
                      "default": "control"},
    "treatment_label": {"keys": ["algorithm", "condition", "treatment"],
                        "default": "treatment"},
    "reference_condition": {"keys": ["algorithm", "condition", "reference"]},
    "tmp_dir": {"keys": ["resources", "tmp", "dir"]},
}

def get_reference_condition(config):
    """Base level for differential testing, the control label unless configured.
    """
    return tz.get_in(LOOKUPS["reference_condition"]["keys"], config) or get_control_label(config)

def getter(keys, global_default=None, always_list=False):
    def lookup(config, default=None):
        default = global_default if default is None else default
        val = tz.get_in(keys, config, default)
        if always_list:
            if not val:
                val = []
            elif not isinstance(val, (list, tuple)): val = [val]
        return val
    return lookup

def setter(keys):
    def update(config, value):
        return tz.update_in(config, keys, lambda x: value, default=value)
    return update

"""
generate the getter and setter functions but don't override any explicitly
defined
"""
_g = globals()
for k, v in LOOKUPS.items():
    keys = v['keys']
    getter_fn = 'get_' + k
    if getter_fn not in _g:
        _g["get_" + k] = getter(keys, v.get('default', None), v.get("always_list", False))
    setter_fn = 'set_' + k
    if setter_fn not in _g:
        _g["set_" + k] = setter(keys)
