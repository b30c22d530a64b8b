"""
Setup script for Port Monitor.

Usage:
    pip install -e .[test]        # development install
    python setup.py py2app        # build the macOS application (needs py2app)

The resulting app will be in the 'dist' folder.
"""
from setuptools import find_packages, setup

APP = ['port_monitor.py']
DATA_FILES = []

OPTIONS = {
    'argv_emulation': False,
    'plist': {
        'CFBundleName': 'Port Monitor',
        'CFBundleDisplayName': 'Port Monitor',
        'CFBundleIdentifier': 'com.portmonitor.app',
        'CFBundleVersion': '1.0.0',
        'CFBundleShortVersionString': '1.0.0',
        'LSMinimumSystemVersion': '10.14.0',
        'LSUIElement': True,  # Hide dock icon (menu bar app)
        'NSHighResolutionCapable': True,
    },
    'packages': [
        # Our packages
        'monitor',
        'config',
        'app',
    ],
    'includes': [
        'rumps',
        'psutil',
        'PIL',
        'PIL.Image',
        'PIL.ImageDraw',
        'objc',
        'Foundation',
        'AppKit',
    ],
    'excludes': [
        'tkinter',
        'pytest',
        'pip',
    ],
    'site_packages': True,
}

setup(
    app=APP,
    name='port-monitor',
    version='1.0.0',
    description='macOS menu bar list of listening TCP ports and their processes',
    python_requires='>=3.8',
    packages=find_packages(include=['app', 'app.*', 'config', 'monitor']),
    py_modules=['port_monitor'],
    install_requires=[
        'psutil>=5.9',
        'Pillow>=9.0',
        'rumps>=0.4.0; sys_platform == "darwin"',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': ['port-monitor=port_monitor:main'],
    },
    data_files=DATA_FILES,
    options={'py2app': OPTIONS},
)
