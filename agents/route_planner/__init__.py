# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Route Planner Agent Module

Identifies points of interest for a journey and streams them back as the
'itinerary-ideas' artifact.
"""
