from setuptools import setup, find_packages

with open('requirements.txt', 'r') as f:
    requirements = [line.strip() for line in f.readlines() if line.strip() and not line.startswith("#")]

setup(
    name                 = "epideux",
    version              = "0.0.0.dev0",
    description          = "Agent based location-graph epidemic simulation.",
    long_description     = "Agent based location-graph epidemic simulation.",
    classifiers          = [
        "Development Status :: 1 - Planning",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Scientific/Engineering",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    zip_safe             = False,
    python_requires      = '>=3.8',
    install_requires     = requirements,
    extras_require       = {
        "test": [
            "pytest",
        ],
    },
    packages             = find_packages("src"),
    package_dir          = {'': 'src'},
    package_data         = {'epideux': ['configs/simulation/*.yaml']},
    entry_points         = {
        "console_scripts": [
            "epideux-run = epideux.run:main",
        ],
    },
)
