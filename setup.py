import setuptools

setuptools.setup(
    name='complgen',
    version='0.1',
    license='MIT',
    zip_safe=False,
    packages=setuptools.find_packages(include=['complgen', 'complgen.*']),
    install_requires=[
        'pyyaml', 'rich'
    ],
    python_requires='>=3.8',
    entry_points={
        'console_scripts': ['complgen = complgen.main:main'],
    },
    description='Generate Bash, Zsh, Fish, PowerShell and Elvish completion scripts from a declarative CLI definition and embed them in a C++ table.',
)
