#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
import unittest

from sculptfade.core.visual import (
    BLEND_ONE_MINUS_SRC_ALPHA,
    BLEND_SRC_ALPHA,
    RENDER_QUEUE_GEOMETRY,
    RENDER_QUEUE_TRANSPARENT,
    Material,
    Renderer,
    Texture,
    VisualMutator,
)


class RendererMaterialTests(unittest.TestCase):
    def test_owned_material_is_private_copy(self):
        shared = Material.with_slots(["_MainTex"])
        first = Renderer(shared)
        second = Renderer(shared)

        owned = first.get_owned_material()
        self.assertIs(owned, first.get_owned_material())
        self.assertIsNot(owned, shared)

        VisualMutator(owned).apply_replacement("_MainTex", Texture("lit"))
        VisualMutator(owned).enable_transparency()

        self.assertIsNone(shared.get_texture("_MainTex"))
        self.assertEqual(shared.render_queue, RENDER_QUEUE_GEOMETRY)
        self.assertIsNone(second.get_owned_material().get_texture("_MainTex"))


class VisualMutatorTests(unittest.TestCase):
    def setUp(self):
        self.material = Material.with_slots(["_MainTex", "_EmissionMap"], color=(0.1, 0.2, 0.3, 1.0))
        self.mutator = VisualMutator(self.material)

    def test_apply_replacement_sets_named_slot(self):
        texture = Texture("lit")

        self.assertTrue(self.mutator.apply_replacement("_EmissionMap", texture))
        self.assertIs(self.material.get_texture("_EmissionMap"), texture)
        self.assertIsNone(self.material.get_texture("_MainTex"))

        # Reassigning the same value is harmless
        self.assertTrue(self.mutator.apply_replacement("_EmissionMap", texture))
        self.assertIs(self.material.get_texture("_EmissionMap"), texture)

    def test_apply_replacement_without_resource_is_noop(self):
        self.assertFalse(self.mutator.apply_replacement("_MainTex", None))
        self.assertIsNone(self.material.get_texture("_MainTex"))

    def test_apply_replacement_without_material_is_noop(self):
        mutator = VisualMutator(None)
        self.assertFalse(mutator.apply_replacement("_MainTex", Texture("lit")))

    def test_unknown_slot_is_silently_ignored(self):
        self.assertFalse(self.mutator.apply_replacement("_DetailAlbedoMap", Texture("lit")))
        self.assertNotIn("_DetailAlbedoMap", self.material.textures)

    def test_enable_transparency_switches_blend_state(self):
        self.material.enable_keyword("_ALPHATEST_ON")
        self.material.enable_keyword("_ALPHAPREMULTIPLY_ON")

        self.mutator.enable_transparency()

        self.assertEqual(self.material.floats["_Mode"], 3.0)
        self.assertEqual(self.material.ints["_SrcBlend"], BLEND_SRC_ALPHA)
        self.assertEqual(self.material.ints["_DstBlend"], BLEND_ONE_MINUS_SRC_ALPHA)
        self.assertEqual(self.material.ints["_ZWrite"], 0)
        self.assertEqual(self.material.keywords, {"_ALPHABLEND_ON"})
        self.assertEqual(self.material.render_queue, RENDER_QUEUE_TRANSPARENT)
        self.assertTrue(self.mutator.transparent)

    def test_set_opacity_keeps_rgb(self):
        self.mutator.enable_transparency()
        self.mutator.set_opacity(0.25)

        self.assertEqual(self.material.color, (0.1, 0.2, 0.3, 0.25))
        self.assertEqual(self.mutator.opacity, 0.25)

        self.mutator.set_opacity(0.0)
        self.assertEqual(self.material.color, (0.1, 0.2, 0.3, 0.0))


if __name__ == "__main__":
    unittest.main()
