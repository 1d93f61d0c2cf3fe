from setuptools import setup, find_packages

setup(
    name="textpane",
    version="0.1.0",
    description="IRC-style formatted text rendering and searchable scrollback",
    packages=find_packages(include=["textpane", "textpane.*"]),
    install_requires=[
        "rich",
        "prompt-toolkit",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.11",
)
