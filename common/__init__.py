# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Common Utilities

Shared helpers used by the agents and the supervisor.
"""
