from .step_10_load_resources import LoadResourcesStep
from .step_20_host_variables import HostVariablesStep
from .step_30_install_path import InstallPathStep
from .step_40_packs import PacksStep
from .step_50_user_variables import UserVariablesStep
from .step_60_custom_actions import CustomActionsStep
from .step_70_privileges import PrivilegesStep
from .step_80_reboot_action import RebootActionStep
from .step_90_optional_resources import OptionalResourcesStep

__all__ = [
    "LoadResourcesStep",
    "HostVariablesStep",
    "InstallPathStep",
    "PacksStep",
    "UserVariablesStep",
    "CustomActionsStep",
    "PrivilegesStep",
    "RebootActionStep",
    "OptionalResourcesStep",
]
