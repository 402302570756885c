# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Plan Composer Agent Module

Composes the final travel plan and streams it back as the 'travel-plan'
artifact.
"""
