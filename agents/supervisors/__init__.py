# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Supervisors Module

This module contains supervisor agents that orchestrate workflows and coordinate
between different services. The travel supervisor turns journey requests into
travel plans by calling the specialist agents.
"""
