from __future__ import annotations

import unittest

import numpy as np
import torch

from rastrix_core.render.renderer import Renderer
from rastrix_core.render.surface import TensorSurface


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[object] = []

    def draw(self, renderer: Renderer, viewport: object) -> None:
        self.calls.append(viewport)
        renderer.put_pixel((0, 0), (255, 0, 0, 255))


class TensorSurfaceTests(unittest.TestCase):
    def test_starts_with_background(self) -> None:
        surface = TensorSurface(4, 3, background=(1, 2, 3, 255))
        snap = surface.read_snapshot()
        self.assertEqual(tuple(snap.shape), (3, 4, 4))
        self.assertEqual(snap.dtype, torch.uint8)
        self.assertTrue(torch.all(snap == torch.tensor([1, 2, 3, 255], dtype=torch.uint8)))
        self.assertEqual(surface.revision, 0)

    def test_submit_frame_emits_present_events(self) -> None:
        surface = TensorSurface(2, 2)
        frame = np.full((2, 2, 4), 9, dtype=np.uint8)
        first = surface.submit_frame(frame)
        second = surface.submit_frame(frame)
        self.assertEqual((first.event_id, first.revision), (1, 1))
        self.assertEqual((second.event_id, second.revision), (2, 2))
        self.assertEqual(surface.pending_present_count(), 2)
        self.assertEqual(surface.pop_present_event(), first)
        self.assertEqual(surface.pop_present_event(), second)
        self.assertIsNone(surface.pop_present_event())

    def test_snapshot_is_a_copy(self) -> None:
        surface = TensorSurface(2, 2)
        frame = np.zeros((2, 2, 4), dtype=np.uint8)
        surface.submit_frame(frame)
        frame[...] = 200
        snap = surface.read_snapshot()
        snap[...] = 50
        self.assertTrue(torch.all(surface.read_snapshot() == 0))

    def test_invalid_frames_raise(self) -> None:
        surface = TensorSurface(2, 2)
        with self.assertRaises(ValueError):
            surface.submit_frame(np.zeros((3, 2, 4), dtype=np.uint8))
        with self.assertRaises(ValueError):
            surface.submit_frame(np.zeros((2, 2, 4), dtype=np.float32))
        with self.assertRaises(ValueError):
            TensorSurface(0, 2)


class RendererPresentTests(unittest.TestCase):
    def test_present_copies_buffer_to_surface(self) -> None:
        renderer = Renderer(5, 4, background="#102030", surface=TensorSurface(5, 4))
        renderer.put_pixel((2, 1), (255, 0, 0, 255))
        event = renderer.present()
        self.assertIsNotNone(event)
        self.assertTrue(torch.equal(renderer.surface.read_snapshot(), torch.from_numpy(renderer.buffer.pixels)))

    def test_present_without_surface_is_a_no_op(self) -> None:
        self.assertIsNone(Renderer(3, 3).present())

    def test_resize_keeps_surface_in_step(self) -> None:
        surface = TensorSurface(5, 4)
        renderer = Renderer(5, 4, surface=surface)
        renderer.resize(8, 6)
        self.assertEqual(renderer.size, (8, 6))
        self.assertEqual((surface.width, surface.height), (8, 6))
        renderer.clear()
        event = renderer.present()
        self.assertEqual(event.revision, 1)
        self.assertEqual(tuple(surface.read_snapshot().shape), (6, 8, 4))

    def test_render_all_clears_then_draws_each_renderable(self) -> None:
        renderer = Renderer(3, 3, background="black", surface=TensorSurface(3, 3))
        renderer.put_pixel((2, 2), (0, 255, 0, 255))
        recorder = _Recorder()
        renderer.add_renderable(recorder)
        event = renderer.render_all("viewport")
        self.assertEqual(recorder.calls, ["viewport"])
        self.assertEqual(renderer.buffer.get_pixel(2, 2), (0, 0, 0, 255))
        self.assertEqual(renderer.buffer.get_pixel(0, 0), (255, 0, 0, 255))
        self.assertEqual(event.revision, 1)


if __name__ == "__main__":
    unittest.main()
