"""Modulation host: a component that owns and loops an ordered set of modulators."""
from loguru import logger

from .entity import Entity
from .ordered import OrderedEntityList

logger = logger.bind(module="components.modulation")


class Modulator(Entity):
    """A time-based source advanced once per tick by its host.

    Subclasses implement :meth:`run`. ``elapsed_ms`` accumulates while running.
    """

    def __init__(self, label: str | None = None):
        super().__init__(label)
        self.running = False
        self.elapsed_ms = 0.0

    def start(self) -> "Modulator":
        self.check_alive()
        self.running = True
        return self

    def stop(self) -> "Modulator":
        self.running = False
        return self

    def loop(self, delta_ms: float) -> None:
        if not self.running:
            return
        self.elapsed_ms += delta_ms
        self.run(delta_ms)

    def run(self, delta_ms: float) -> None:
        pass

    def dispose(self) -> None:
        self.running = False
        super().dispose()


class ModulationHost:
    """Owns modulators and loops them in index order.

    Adding, moving or removing a modulator from inside a modulator's own
    ``run`` raises :class:`ReentrancyError`.
    """

    def __init__(self, label: str = "host"):
        self.label = label
        self._modulators: OrderedEntityList[Modulator] = OrderedEntityList(f"{label}.modulators")

    @property
    def modulators(self) -> tuple[Modulator, ...]:
        return self._modulators.items

    def add_modulator(self, modulator: Modulator, index: int | None = None) -> Modulator:
        return self._modulators.add(modulator, index)

    def start_modulator(self, modulator: Modulator) -> Modulator:
        self.add_modulator(modulator).start()
        return modulator

    def move_modulator(self, modulator: Modulator, index: int) -> Modulator:
        return self._modulators.move(modulator, index)

    def remove_modulator(self, modulator: Modulator) -> Modulator:
        return self._modulators.remove(modulator)

    def get_modulator(self, label: str) -> Modulator | None:
        return self._modulators.find(label)

    def loop(self, delta_ms: float) -> None:
        self._modulators.iterate(lambda modulator: modulator.loop(delta_ms))

    def dispose(self) -> None:
        """Dispose every modulator. Not allowed from inside :meth:`loop`."""
        removed = self._modulators.clear()
        logger.debug(f"Disposed {self.label} with {len(removed)} modulators")
