import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pngstash",
    version="0.0.1",
    author="Gianluca Pacchiella",
    author_email="gp@ktln2.org",
    description="Hide messages inside PNG chunks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/gipi/pngstash",
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    scripts=['scripts/pngme.py'],
    install_requires=[
        'bitstring>=4.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'pillow',
        ],
    },
    python_requires='>=3.8',
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Operating System :: OS Independent",
    ],
)
