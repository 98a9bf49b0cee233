# gallery_media/services/media_pipeline/generators/responsive_set_generator.py
"""
Responsive Set Generator Component

Produces one width-bounded variant per requested width, concurrently.
The batch is all-or-nothing: if any width fails, the whole call fails once
every worker has finished.
"""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional, Sequence

from ....constants import DEFAULT_RESPONSIVE_WIDTHS, MAX_CONCURRENT_WORKERS
from ....enums import LoggerName
from ....models import ProcessedVariant, ResponsiveVariant, ThumbnailOptions, TranscodeOptions
from ...logger import get_service_logger
from .transcoder import Transcoder

logger = get_service_logger(LoggerName.RESPONSIVE_GENERATOR)


class ResponsiveSetGenerator:
    """
    Component responsible for responsive size sets.

    Each width is transcoded independently with that width as both the max
    width and max height, so the larger side is capped and the aspect ratio
    is preserved.
    """

    def __init__(
        self,
        transcoder: Optional[Transcoder] = None,
        max_workers: int = MAX_CONCURRENT_WORKERS,
        default_widths: Sequence[int] = DEFAULT_RESPONSIVE_WIDTHS,
    ):
        """
        Args:
            transcoder: Transcoder instance used for every width
            max_workers: Maximum number of concurrent worker threads
            default_widths: Widths used when none are requested
        """
        self.transcoder = transcoder or Transcoder()
        self.max_workers = max(1, min(max_workers, 16))  # Limit to reasonable range
        self.default_widths = tuple(default_widths)

    def responsive_set(
        self,
        buffer: bytes,
        widths: Optional[Sequence[int]] = None,
        options: Optional[ThumbnailOptions] = None,
    ) -> List[ResponsiveVariant]:
        """
        Generate every requested width concurrently.

        Args:
            buffer: Source image bytes
            widths: Width bounds, in the order results should be returned
            options: Format and quality shared by all widths

        Returns:
            List of ResponsiveVariant in the same order as widths

        Raises:
            ValueError: a requested width is not a positive integer
            DecodeError / EncodeError: the first failure, in request order
        """
        widths = list(self.default_widths if widths is None else widths)
        for width in widths:
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                raise ValueError(f"Responsive width must be a positive integer, got {width!r}")

        if not widths:
            return []

        options = options or ThumbnailOptions()
        logger.debug(f"Generating responsive set for widths {widths}")

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(widths))) as executor:
            futures: List[Future] = [
                executor.submit(self._transcode_width, buffer, width, options)
                for width in widths
            ]
            wait(futures)

        results: List[ResponsiveVariant] = []
        failures = []
        for width, future in zip(widths, futures):
            error = future.exception()
            if error is not None:
                failures.append((width, error))
                continue
            results.append(ResponsiveVariant(width=width, variant=future.result()))

        if failures:
            _, first_error = failures[0]
            logger.error(
                f"Responsive set failed for {len(failures)} of {len(widths)} widths",
                exception=first_error,
                extra_context={"failed_widths": [w for w, _ in failures]},
            )
            raise first_error

        logger.debug(
            f"Generated {len(results)} responsive variants",
            extra_context={"sizes": {r.width: r.variant.size for r in results}},
        )
        return results

    def _transcode_width(
        self, buffer: bytes, width: int, options: ThumbnailOptions
    ) -> ProcessedVariant:
        return self.transcoder.transcode(
            buffer,
            TranscodeOptions(
                format=options.format,
                quality=options.quality,
                max_width=width,
                max_height=width,
            ),
        )
