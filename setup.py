from pathlib import Path

from setuptools import find_packages, setup

BASE_DIR = Path(__file__).parent.resolve(strict=True)
VERSION = '1.0.0'
PACKAGE_NAME = 'multireg'
PACKAGES = [p for p in find_packages() if not p.startswith('tests')]


def parse_requirements():
    reqs = []
    with open(BASE_DIR / 'requirements.txt', 'r') as fd:
        for line in fd.readlines():
            line = line.strip()
            if line:
                reqs.append(line)
    return reqs


def get_description():
    return (BASE_DIR / 'README.md').read_text(errors='ignore')


if __name__ == '__main__':
    setup(
        version=VERSION,
        name=PACKAGE_NAME,
        description='multi-value registry with configurable collision policies',
        long_description=get_description(),
        long_description_content_type='text/markdown',
        packages=PACKAGES,
        include_package_data=True,
        install_requires=parse_requirements(),
        python_requires='>=3.9',
        entry_points={
            'console_scripts': ['multireg=multireg.__main__:cli',
                                ],
        },
        classifiers=[
            'Programming Language :: Python :: 3.9',
            'Programming Language :: Python :: 3.10',
            'Programming Language :: Python :: 3.11',
            'Programming Language :: Python :: 3.12',
            'Programming Language :: Python :: 3.13',
        ],
        extras_require={'test': ['pytest']},
        tests_require=['pytest', ],
    )
