[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edukernel"
version = "0.1.0"
description = "A small teaching kernel simulated in Python: printf formatting, partition allocators, VGA and UART devices, a wall clock, FCFS tasks and a command shell."
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "operating-system", "education", "memory-allocator", "scheduler", "shell", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
edukernel = "edukernel.kernel:main"

[tool.hatch.build.targets.wheel]
packages = ["edukernel"]

[tool.pytest.ini_options]
addopts = "-ra"
