"""
Command-line interface for galvostim.

The CLI is built using the Click framework:

- Building protocols from JSON experiment files
- Computing the scale factor from a calibration file
- Uploading protocols and driving the scan controller directly

Examples
--------
Building a protocol and uploading it:
```bash
$ galvostim build grid.json -o grid.txt
$ galvostim upload grid.txt --port /dev/ttyUSB0 --execute
```

CLI Tree
--------

```
$ galvostim --tree
cli
└── build
└── calibrate
└── dsp
    └── clear
    └── execute
    └── offset
    └── park
    └── set
└── patterns
└── ports
└── summary
└── upload
```
"""

from .base import cli, tree_option
from .dsp import dsp

cli.add_command(dsp)

__all__ = ["cli", "tree_option"]
