"""
Config file handling for get_davclient.

The config file is a JSON (or, with PyYAML installed, YAML) mapping of
section names to connection parameters.  Keys may carry a ``webdav_``
prefix, and ``user``/``pass`` are accepted for ``username``/``password``.
A section may name another section in ``inherits`` to take its values
as defaults::

    {
        "default": {"webdav_url": "https://dav.example.com/", "webdav_user": "joe"},
        "work": {"inherits": "default", "webdav_url": "https://dav.example.org/"}
    }
"""
import json
import logging
import os
from collections.abc import Iterable
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

log = logging.getLogger(__name__)

KEY_ALIASES = {"user": "username", "pass": "password"}


def config_paths() -> List[str]:
    """The files searched when no config file is given, first match wins"""
    cfgdir = os.path.join(os.environ.get("HOME", "/"), ".config", "davkit")
    return [
        os.path.join(cfgdir, "webdav.conf"),
        os.path.join(cfgdir, "webdav.yaml"),
        os.path.join(cfgdir, "webdav.json"),
        "/etc/davkit/webdav.conf",
    ]


def _load(fn: str) -> Optional[Dict[str, Any]]:
    with open(fn, "rb") as f:
        raw = f.read()
    try:
        return json.loads(raw)
    except ValueError:
        pass
    ## Late import, yaml is an optional dependency
    try:
        import yaml
    except ImportError:
        log.error(f"config file {fn} is not valid json, and pyyaml is not installed")
        return None
    try:
        return yaml.load(raw, yaml.SafeLoader)
    except yaml.YAMLError:
        log.error(f"config file {fn} is neither valid json nor yaml", exc_info=True)
        return None


def read_config(fn: Optional[str] = None) -> Dict[str, Any]:
    """
    Reads a config file.  Without ``fn``, the first existing file of
    :func:`config_paths` is read.

    A missing or broken file gives an empty dict; problems are logged,
    not raised, so a bad config file never stops a client from being
    configured by other means.
    """
    if not fn:
        for path in config_paths():
            if os.path.exists(path):
                return read_config(path)
        log.debug("no config file found")
        return {}

    try:
        cfg = _load(fn)
    except FileNotFoundError:
        log.info(f"config file {fn} not found")
        return {}
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        log.error(f"config file {fn} should hold a mapping of sections")
        return {}
    return cfg


def config_section(config: Dict[str, Any], section: str = "default") -> Dict[str, Any]:
    """
    The section with values from the ``inherits`` chain filled in.
    Unknown sections give an empty dict.
    """
    chain: List[str] = []
    while section in config and section not in chain:
        chain.append(section)
        section = config[section].get("inherits")
    if section in chain:
        log.error(f"config section {section} inherits from itself")
    ret: Dict[str, Any] = {}
    for name in reversed(chain):
        ret.update(config[name])
    ret.pop("inherits", None)
    return ret


def connection_params(section: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """
    Maps the keys of a config section to DAVClient keyword arguments,
    dropping anything not in ``keys``.
    """
    keys = set(keys)
    ret: Dict[str, Any] = {}
    for k, value in section.items():
        key = k[len("webdav_") :] if k.startswith("webdav_") else k
        key = KEY_ALIASES.get(key, key)
        if key in keys and value is not None:
            ret[key] = value
    return ret
