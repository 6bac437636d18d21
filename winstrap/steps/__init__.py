from .step_10_install_packages import InstallPackagesStep
from .step_20_link_dotfiles import LinkDotfilesStep
from .step_30_install_fonts import InstallFontsStep
from .step_40_configure_profile import ConfigureProfileStep

__all__ = [
    "InstallPackagesStep",
    "LinkDotfilesStep",
    "InstallFontsStep",
    "ConfigureProfileStep",
]
