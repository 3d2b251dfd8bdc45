import threading
import time

from core.services.fanout import settle_all


class TestSettleAll:
    def test_empty_input(self):
        assert settle_all(lambda item: item, [], max_workers=4) == []

    def test_failures_do_not_stop_other_items(self):
        seen: list[int] = []
        lock = threading.Lock()

        def operation(item: int) -> None:
            with lock:
                seen.append(item)
            if item % 2:
                raise RuntimeError(f"boom {item}")

        outcomes = settle_all(operation, [0, 1, 2, 3, 4], max_workers=2)

        assert sorted(seen) == [0, 1, 2, 3, 4]
        assert [outcome.ok for outcome in outcomes] == [True, False, True, False, True]
        assert str(outcomes[1].error) == "boom 1"

    def test_outcomes_keep_input_order(self):
        def operation(item: float) -> None:
            time.sleep(item)

        outcomes = settle_all(operation, [0.05, 0.0, 0.02], max_workers=3)

        assert [outcome.item for outcome in outcomes] == [0.05, 0.0, 0.02]

    def test_runs_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        outcomes = settle_all(lambda _: barrier.wait(), ["a", "b", "c"], max_workers=3)

        assert all(outcome.ok for outcome in outcomes)
