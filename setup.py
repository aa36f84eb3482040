#encoding="utf-8"
import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="rigdef",
    version="0.0.1",
    author="Sgnes",
    author_email="sgnes0514@gmai.com",
    description="Parse Rigs of Rods truck definition files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=[

      ],
    extras_require={
        "test": ["pytest"],
    },
    package_dir={"rigdef": "src"},
    packages=[
        'rigdef'
        ],

    python_requires='>=3.9',
)
