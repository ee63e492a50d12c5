"""
Environment derived for each directive

Every spawned process sees the inherited environment plus a handful of
variables describing where the directive came from. With the default
settings these are:

    SOURCEGEN_OS         host operating system (linux, macos, windows, ...)
    SOURCEGEN_MODULE     module specifier
    SOURCEGEN_LINE       1-based line of the directive
    SOURCEGEN_CHARACTER  1-based character of the directive
    SOURCEGEN_DIR        directory containing the module file
    DOLLAR               a literal '$'

SOURCEGEN_DIR is left out for modules that are not local files.
"""

import os
import platform
from typing import Dict, Mapping, Optional

from ..config.settings import AppSettings, appsettings
from ..models.directive import Directive
from ..models.module import Module


# platform.system() names that differ from the reported identifier
_OS_NAMES = {"darwin": "macos"}


def os_identify() -> str:
    """Host operating system identifier"""
    system = platform.system().lower()
    return _OS_NAMES.get(system, system)


def directiveEnv_derive(
    module: Module,
    directive: Directive,
    settings: Optional[AppSettings] = None,
) -> Dict[str, str]:
    """
    Build the variables describing a directive's origin

    Args:
        module: Module the directive belongs to
        directive: The directive being run
        settings: Source of the variable prefix (default: appsettings)

    Returns:
        Mapping of derived variable names to values
    """
    settings = settings or appsettings
    env = {
        settings.envName_make("OS"): os_identify(),
        settings.envName_make("MODULE"): module.specifier,
        settings.envName_make("LINE"): str(directive.line),
        settings.envName_make("CHARACTER"): str(directive.character),
    }
    path = module.file_path
    if path is not None:
        env[settings.envName_make("DIR")] = str(path.absolute().parent)
    env["DOLLAR"] = "$"
    return env


def env_merge(
    derived: Mapping[str, str], base_env: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """
    Overlay derived variables on the inherited environment

    Args:
        derived: Variables from directiveEnv_derive()
        base_env: Inherited environment (default: os.environ)

    Returns:
        New mapping; derived variables win over inherited ones
    """
    merged = dict(os.environ if base_env is None else base_env)
    merged.update(derived)
    return merged
