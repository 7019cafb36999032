"""First-fit frame allocator.

Unlike a free-set page allocator (where any free frame will do), this
allocator gives each process one *contiguous* run of frames.  Contiguity
brings back **external fragmentation**: enough frames may be free in
total while no single run is long enough.  That is exactly the case a
granted request can still fail on.

First fit scans from frame 0 upwards and takes the first run of ``k``
free frames it finds::

    frames:  [A][A][ ][ ][B][ ][ ][ ]     k = 2
                    ^^^^^^                 → start frame 2

As soon as an owned frame is met the current run is abandoned and the
count restarts after it.  There is no gap skipping and no best-fit
search, so the result depends only on the map and ``k``.
"""

import math

from mmu_sim.memory.maps import PhysicalMemoryMap


def required_frames(size_bytes: int, *, frame_size: int) -> int:
    """Return how many whole frames *size_bytes* occupies (rounded up)."""
    return math.ceil(size_bytes / frame_size)


class FrameAllocator:
    """Find and reserve contiguous runs of frames in physical memory."""

    def __init__(self, physical: PhysicalMemoryMap) -> None:
        """Create an allocator over a physical memory map."""
        self._physical = physical

    def find_run(self, num_frames: int) -> int | None:
        """Return the start of the first free run of *num_frames*, or None.

        Does not modify the map.
        """
        if num_frames < 1:
            msg = f"Cannot allocate {num_frames} frames"
            raise ValueError(msg)
        run_start: int | None = None
        run_length = 0
        for frame in range(len(self._physical)):
            if not self._physical.is_free(frame):
                run_start = None
                run_length = 0
                continue
            if run_start is None:
                run_start = frame
            run_length += 1
            if run_length == num_frames:
                return run_start
        return None

    def first_fit(self, pid: int, *, num_frames: int) -> int | None:
        """Reserve the first free run of *num_frames* frames for *pid*.

        Args:
            pid: The process receiving the frames.
            num_frames: Length of the run (at least 1).

        Returns:
            The starting frame index, or None if no run is long enough.
            On None nothing has been reserved.

        Raises:
            ValueError: If *num_frames* is less than 1.

        """
        start = self.find_run(num_frames)
        if start is None:
            return None
        for frame in range(start, start + num_frames):
            self._physical.claim(frame, pid)
        return start

    def release(self, start_frame: int, *, num_frames: int) -> None:
        """Free a run of frames starting at *start_frame*."""
        for frame in range(start_frame, start_frame + num_frames):
            self._physical.release(frame)
