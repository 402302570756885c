# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
POI Researcher Agent Module

Researches one point of interest per request and streams the findings back
as the 'poi-research' artifact.
"""
