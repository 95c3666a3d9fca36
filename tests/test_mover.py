import hashlib
import tempfile
import unittest
from pathlib import Path

from audio_sort.models import FileAndHash, MovePlan, RunSummary, UnmovableSetError
from audio_sort.mover import PlanExecutor, UnmovableRegistry


def _sha(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class TestUnmovableRegistry(unittest.TestCase):
    def test_groups_by_target(self) -> None:
        registry = UnmovableRegistry()
        target = Path("/m/a/b/c.mp3")
        blocker = FileAndHash(target, "h0")
        registry.record(target, blocker, FileAndHash(Path("/m/1"), "h1"))
        registry.record(target, blocker, FileAndHash(Path("/m/2"), "h2"))
        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.count(), 2)
        [(key, entry)] = list(registry.items())
        self.assertEqual(key, target)
        self.assertEqual([u.filepath for u in entry.unmovables], [Path("/m/1"), Path("/m/2")])

    def test_different_blocker_is_an_error(self) -> None:
        registry = UnmovableRegistry()
        target = Path("/m/a/b/c.mp3")
        registry.record(target, FileAndHash(target, "h0"), FileAndHash(Path("/m/1"), "h1"))
        with self.assertRaises(UnmovableSetError):
            registry.record(
                target, FileAndHash(Path("/m/other"), "h0"), FileAndHash(Path("/m/2"), "h2")
            )


class TestPlanExecutor(unittest.TestCase):
    def test_moves_and_defers_collisions(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            first = root / "1.mp3"
            second = root / "2.mp3"
            third = root / "3.mp3"
            first.write_bytes(b"one")
            second.write_bytes(b"two")
            third.write_bytes(b"one")
            target = root / "a" / "b" / "c.mp3"
            plan = MovePlan()
            plan.add_known(first, target)
            plan.add_known(second, target)
            plan.add_known(third, target)

            summary = RunSummary()
            registry = PlanExecutor().execute(plan, summary)

            self.assertEqual(target.read_bytes(), b"one")
            self.assertTrue(second.exists())
            self.assertTrue(third.exists())
            self.assertEqual(summary.placed, 1)
            [(key, entry)] = list(registry.items())
            self.assertEqual(key, target)
            self.assertEqual(entry.blocker, FileAndHash(target, _sha(b"one")))
            self.assertEqual(
                entry.unmovables,
                [FileAndHash(second, _sha(b"two")), FileAndHash(third, _sha(b"one"))],
            )

    def test_already_placed_file_is_noop(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            target = root / "a" / "b" / "c.mp3"
            target.parent.mkdir(parents=True)
            target.write_bytes(b"x")
            plan = MovePlan()
            plan.add_known(target, target)
            summary = RunSummary()
            registry = PlanExecutor().execute(plan, summary)
            self.assertEqual(len(registry), 0)
            self.assertEqual(summary.already_placed, 1)
            self.assertEqual(summary.moves, [])


if __name__ == "__main__":
    unittest.main()
