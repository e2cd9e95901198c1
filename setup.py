from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="iris-color-analyzer",
    version="1.0.0",
    author="Iris Color Analyzer Team",
    description="Perceptual eye color estimation from close-up iris photos",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["iris_color", "iris_color.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Scientific/Engineering :: Image Recognition",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "iris-color=iris_color.cli.analyze_images:main",
        ],
    },
    include_package_data=True,
    package_data={
        "iris_color": ["data/*.json"],
    },
)
