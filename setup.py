from setuptools import setup
import os

# Read version from version module
def get_version():
    version_file = os.path.join(os.path.dirname(__file__), 'bootswitch', '_version.py')
    with open(version_file, 'r') as f:
        for line in f:
            if line.startswith('__version__'):
                return line.split('=')[1].strip().strip('"\'')
    raise RuntimeError('Unable to find version string.')

setup(
    name="bootswitch",
    version=get_version(),
    description="Restart into another boot-loader entry after a cancellable countdown",
    long_description="Adds a 'Restart to ...' action to a host menu. After a cancellable "
                     "countdown it sets the next GRUB entry through pkexec and asks "
                     "systemd-logind to reboot.",
    license="MIT",
    packages=["bootswitch"],
    install_requires=[],
    extras_require={
        # logind reboot call; needs the libdbus development files to build
        "dbus": ["dbus-python"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "bootswitch=bootswitch.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.8",
)
