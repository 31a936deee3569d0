from setuptools import find_packages, setup

setup(
    name='nsg-jobclient',
    version='0.3.0',
    description='Neuroscience Gateway (NSG) job client with results packaging',
    packages=find_packages(exclude=[
        'nsgjob.test',
        'nsgjob.test.*',
    ]),
    python_requires='>=3.8',
    install_requires=[
        'chardet',
        'python-dateutil',
        'requests',
        'simplejson',
    ],
    extras_require={
        'test': [
            'mock',
            'pytest',
        ],
    },
    entry_points={
        "console_scripts": [
            "nsgjob = nsgjob.main:main",
        ],
    }
)
