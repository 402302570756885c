# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Configuration Module

- config: Environment-driven settings
- logging_config: Process-wide logging setup
"""
