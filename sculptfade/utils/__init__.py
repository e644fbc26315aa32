#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Utility helpers shared across SculptFade."""

import json
from pathlib import Path

__all__ = ("list_available_scenes",)


def list_available_scenes(scenes_dir='scenes'):
    """List all available scene files with their metadata."""
    scenes_path = Path(scenes_dir)
    scenes = []

    if not scenes_path.exists():
        return scenes

    for scene_file in sorted(scenes_path.glob('*.json')):
        try:
            with open(scene_file, 'r', encoding='utf-8') as f:
                scene_data = json.load(f)
            name = scene_data.get('name', scene_file.stem)
            description = scene_data.get('description', 'No description')
            object_count = len(scene_data.get('objects', []))
        except (OSError, ValueError, AttributeError):
            name = scene_file.stem
            description = '(invalid JSON)'
            object_count = 0
        scenes.append({
            'file': scene_file.name,
            'path': str(scene_file),
            'name': name,
            'description': description,
            'object_count': object_count,
        })

    return scenes
