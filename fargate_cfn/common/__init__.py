# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used functions shared across all modules.
"""

import re

NONALPHANUM = re.compile(r"([^a-zA-Z\d]+)")
