"""
Connected-region color segmentation.

The segmenter works in three phases:

1. Labeling: a raster scan starts a flood fill at every unlabeled pixel.
   The fill uses an explicit stack and the seed pixel's color as a fixed
   anchor; a 4-connected unlabeled neighbor joins when its Euclidean RGB
   distance to the anchor is within tolerance. Each region's mean color is
   computed once, when its fill is exhausted.
2. Merging: every region smaller than min_size is merged into the adjacent
   region with the closest mean color. Decisions are made in one ascending
   pass over region ids and recorded in a union-find parent array. A
   neighbor already merged into the region counts as a candidate at
   distance 0, which leaves the region unmerged. The
   opt-in fixed-point mode repeats passes over merged regions, with sizes
   and means recomputed, until a pass merges nothing.
3. Recoloring: distinct root regions are enumerated in label order and
   painted with a color from the selected scheme. Alpha is unchanged.

Region bookkeeping (sizes, sums, means, parents) is held in dense arrays
indexed by label.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from imagematrix.common.constants import SegmentationConstants
from imagematrix.common.enums import ColorScheme, MergeMode
from imagematrix.core.buffer import PixelBuffer
from imagematrix.core.colors import hsv_to_rgb, luminance, round_half_up_scalar
from imagematrix.exceptions import ErrorMessages, InvalidParameterException, require

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass
class RegionLabels:
    """Output of the flood-fill phase."""

    labels: np.ndarray  # (H, W) int32 region id per pixel
    sizes: np.ndarray  # (N,) pixel count per region
    sums: np.ndarray  # (N, 3) channel sums per region
    means: np.ndarray  # (N, 3) rounded mean color per region

    @property
    def count(self) -> int:
        return int(self.sizes.shape[0])


@dataclass
class SegmentationResult:
    """Segmentation output with the region bookkeeping exposed."""

    buffer: PixelBuffer
    labels: np.ndarray
    sizes: np.ndarray
    means: np.ndarray
    parent: np.ndarray  # (N,) root region per label
    roots: List[int]  # distinct roots in color-assignment order
    colors: Dict[int, RGB] = field(default_factory=dict)

    @property
    def region_count(self) -> int:
        """Number of regions after merging."""
        return len(self.roots)

    def region_map(self) -> np.ndarray:
        """(H, W) array of root region ids."""
        return self.parent[self.labels]

    def region_size(self, root: int) -> int:
        """Total pixel count of a merged region."""
        return int(self.sizes[self.parent == root].sum())


def _mean_colors(sums: np.ndarray, sizes: np.ndarray) -> np.ndarray:
    # Integer round half up of sum / count
    counts = np.asarray(sizes)[..., np.newaxis]
    return (2 * sums + counts) // (2 * counts)


def label_regions(buffer: PixelBuffer, tolerance: float) -> RegionLabels:
    """
    Flood-fill every pixel into a region.

    Args:
        buffer: Source buffer
        tolerance: Maximum RGB distance (inclusive) to the region's seed color

    Returns:
        RegionLabels with labels numbered in raster order of their seeds
    """
    width, height = buffer.width, buffer.height
    flat = buffer.rgb.reshape(-1, 3)
    reds = flat[:, 0].tolist()
    greens = flat[:, 1].tolist()
    blues = flat[:, 2].tolist()

    total = width * height
    unlabeled = SegmentationConstants.UNLABELED
    labels = [unlabeled] * total
    tolerance_sq = tolerance * tolerance
    directions = SegmentationConstants.DIRECTIONS

    sizes: List[int] = []
    sums: List[Tuple[int, int, int]] = []
    current = 0

    for seed in range(total):
        if labels[seed] != unlabeled:
            continue

        base_r, base_g, base_b = reds[seed], greens[seed], blues[seed]
        labels[seed] = current
        sum_r, sum_g, sum_b, count = base_r, base_g, base_b, 1
        stack = [seed]

        while stack:
            index = stack.pop()
            cy, cx = divmod(index, width)
            for dx, dy in directions:
                nx, ny = cx + dx, cy + dy
                if nx < 0 or nx >= width or ny < 0 or ny >= height:
                    continue
                neighbor = ny * width + nx
                if labels[neighbor] != unlabeled:
                    continue

                nr, ng, nb = reds[neighbor], greens[neighbor], blues[neighbor]
                dr, dg, db = nr - base_r, ng - base_g, nb - base_b
                if dr * dr + dg * dg + db * db <= tolerance_sq:
                    labels[neighbor] = current
                    stack.append(neighbor)
                    sum_r += nr
                    sum_g += ng
                    sum_b += nb
                    count += 1

        sizes.append(count)
        sums.append((sum_r, sum_g, sum_b))
        current += 1

    sizes_arr = np.asarray(sizes, dtype=np.int64)
    sums_arr = np.asarray(sums, dtype=np.int64).reshape(-1, 3)
    return RegionLabels(
        labels=np.asarray(labels, dtype=np.int32).reshape(height, width),
        sizes=sizes_arr,
        sums=sums_arr,
        means=_mean_colors(sums_arr, sizes_arr),
    )


def boundary_pairs(labels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Region adjacencies in discovery order.

    Pairs are ordered by pixel (raster order), then by direction
    (left, right, up, down), matching a scan over each region's pixels.

    Args:
        labels: (H, W) region ids

    Returns:
        Tuple of (own, neighbor) label arrays for every 4-adjacent pixel pair
        with different labels
    """
    height, width = labels.shape
    index = np.arange(height * width, dtype=np.int64).reshape(height, width)

    # (own slice, neighbor slice) per direction: left, right, up, down
    views = [
        ((slice(None), slice(1, None)), (slice(None), slice(None, -1))),
        ((slice(None), slice(None, -1)), (slice(None), slice(1, None))),
        ((slice(1, None), slice(None)), (slice(None, -1), slice(None))),
        ((slice(None, -1), slice(None)), (slice(1, None), slice(None))),
    ]

    keys, owners, neighbors = [], [], []
    for direction, (own_view, nb_view) in enumerate(views):
        own = labels[own_view]
        nb = labels[nb_view]
        differs = own != nb
        keys.append(index[own_view][differs] * 4 + direction)
        owners.append(own[differs])
        neighbors.append(nb[differs])

    order = np.argsort(np.concatenate(keys), kind="stable")
    return np.concatenate(owners)[order], np.concatenate(neighbors)[order]


def _group_neighbors(
    owners: np.ndarray, neighbors: np.ndarray, wanted: np.ndarray
) -> Dict[int, List[int]]:
    """Ordered, de-duplicated neighbor lists for the wanted owners."""
    selected = np.isin(owners, wanted)
    grouped: Dict[int, Dict[int, None]] = {}
    for own, nb in zip(owners[selected].tolist(), neighbors[selected].tolist()):
        grouped.setdefault(own, {})[nb] = None
    return {own: list(nbs) for own, nbs in grouped.items()}


class UnionFind:
    """Parent-pointer array over region labels."""

    def __init__(self, count: int):
        self.parent = np.arange(count, dtype=np.int64)

    def find(self, label: int) -> int:
        parent = self.parent
        while parent[label] != label:
            parent[label] = parent[parent[label]]
            label = int(parent[label])
        return int(label)

    def union(self, child: int, root: int) -> None:
        """Attach child (a root) under root."""
        self.parent[child] = root

    def resolve(self) -> np.ndarray:
        """Root of every label."""
        return np.asarray([self.find(i) for i in range(self.parent.shape[0])], dtype=np.int64)


def _closest(
    label: int, candidates: Sequence[int], mean_of: Callable[[int], np.ndarray]
) -> Optional[int]:
    """Candidate with the smallest mean-color distance; first wins on ties."""
    own = mean_of(label).astype(np.float64)
    best, best_distance = None, np.inf
    for candidate in candidates:
        diff = mean_of(candidate).astype(np.float64) - own
        distance = float(np.sqrt(np.dot(diff, diff)))
        if distance < best_distance:
            best, best_distance = candidate, distance
    return best


def merge_small_regions(
    regions: RegionLabels,
    min_size: int,
    mode: Union[MergeMode, str] = MergeMode.SINGLE_PASS,
) -> np.ndarray:
    """
    Merge undersized regions into their closest-colored neighbor.

    Args:
        regions: Output of label_regions
        min_size: Regions with fewer pixels are merged
        mode: single_pass (one ascending pass, means never re-evaluated) or
            fixed_point (repeat over merged regions until stable)

    Returns:
        (N,) array mapping every label to its root
    """
    try:
        mode = MergeMode(mode)
    except ValueError as e:
        raise InvalidParameterException("merge_mode", mode, "unknown merge mode") from e

    uf = UnionFind(regions.count)
    undersized = np.flatnonzero(regions.sizes < min_size)
    if undersized.size == 0:
        return uf.resolve()

    owners, neighbors = boundary_pairs(regions.labels)
    adjacency = _group_neighbors(owners, neighbors, undersized)

    merges = 0
    for label in undersized.tolist():
        candidates = _resolved_candidates(uf, label, adjacency.get(label, []), keep_self=True)
        best = _closest(label, candidates, lambda r: regions.means[r])
        if best is not None and best != label:
            uf.union(label, best)
            merges += 1
    logger.debug(f"Merge pass 1: {merges} of {undersized.size} undersized regions merged")

    passes = 1
    while mode == MergeMode.FIXED_POINT:
        roots = uf.resolve()
        sizes = np.bincount(roots, weights=regions.sizes, minlength=regions.count).astype(np.int64)
        sums = np.zeros_like(regions.sums)
        np.add.at(sums, roots, regions.sums)

        undersized = np.flatnonzero((sizes < min_size) & (roots == np.arange(regions.count)))
        adjacency = _group_neighbors(roots[owners], roots[neighbors], undersized)

        merges = 0
        for root in undersized.tolist():
            if sizes[root] >= min_size:
                continue
            candidates = _resolved_candidates(uf, root, adjacency.get(root, []))
            best = _closest(root, candidates, lambda r: _mean_colors(sums[r], sizes[r]))
            if best is not None:
                uf.union(root, best)
                sizes[best] += sizes[root]
                sums[best] += sums[root]
                merges += 1
        passes += 1
        logger.debug(f"Merge pass {passes}: {merges} regions merged")
        if not merges:
            break

    return uf.resolve()


def _resolved_candidates(
    uf: UnionFind, label: int, neighbors: Sequence[int], keep_self: bool = False
) -> List[int]:
    """
    Distinct neighbor roots in discovery order.

    With keep_self, a neighbor already merged into label stays a candidate;
    its distance is 0, so it wins and the region is left as it is.
    """
    own_root = uf.find(label)
    candidates: Dict[int, None] = {}
    for neighbor in neighbors:
        root = uf.find(neighbor)
        if keep_self or root != own_root:
            candidates[root] = None
    return list(candidates)


def ordered_roots(parent: np.ndarray) -> List[int]:
    """Distinct roots in order of first appearance over labels 0..N-1."""
    _, first = np.unique(parent, return_index=True)
    return parent[np.sort(first)].tolist()


def resolve_scheme(color_scheme: Union[ColorScheme, str]) -> ColorScheme:
    """Map a scheme name to ColorScheme; unknown names fall back to rainbow."""
    try:
        return ColorScheme(color_scheme)
    except ValueError:
        logger.warning(f"Unknown color scheme {color_scheme!r}, using rainbow")
        return ColorScheme.RAINBOW


def assign_colors(
    roots: Sequence[int],
    region_means: np.ndarray,
    color_scheme: Union[ColorScheme, str] = ColorScheme.RAINBOW,
    seed: Optional[int] = None,
) -> Dict[int, RGB]:
    """
    Pick a display color for every root region.

    Args:
        roots: Roots in assignment order (index i of N)
        region_means: Mean color per label, indexed by root. The mean scheme
            paints it as is; preserveBrightness takes its luminance
        color_scheme: Scheme name
        seed: Random seed for preserveBrightness (random hues)

    Returns:
        Dictionary mapping root to (r, g, b)
    """
    scheme = resolve_scheme(color_scheme)
    total = len(roots)
    colors: Dict[int, RGB] = {}

    if scheme == ColorScheme.PRESERVE_BRIGHTNESS:
        rng = np.random.default_rng(seed)
        brightness = luminance(region_means[list(roots)]) / 255 if total else []
        for i, root in enumerate(roots):
            hue = float(rng.random()) * 360
            colors[root] = hsv_to_rgb(
                hue, SegmentationConstants.PRESERVE_BRIGHTNESS_SATURATION, float(brightness[i])
            )
        return colors

    for i, root in enumerate(roots):
        if scheme == ColorScheme.PASTEL:
            colors[root] = hsv_to_rgb(i / total * 360, *SegmentationConstants.PASTEL_SV)
        elif scheme == ColorScheme.GRAYSCALE:
            value = 255 - round_half_up_scalar(i / total * SegmentationConstants.GRAYSCALE_SPAN)
            colors[root] = (value, value, value)
        elif scheme == ColorScheme.HIGH_CONTRAST:
            hue = (i * SegmentationConstants.GOLDEN_ANGLE) % 360
            colors[root] = hsv_to_rgb(hue, *SegmentationConstants.HIGH_CONTRAST_SV)
        elif scheme == ColorScheme.MEAN:
            colors[root] = tuple(int(c) for c in region_means[root])
        else:
            colors[root] = hsv_to_rgb(i / total * 360, *SegmentationConstants.RAINBOW_SV)

    return colors


class RegionSegmenter:
    """Segmentation processor."""

    def __init__(
        self,
        tolerance: float,
        min_size: int,
        color_scheme: Union[ColorScheme, str] = ColorScheme.RAINBOW,
        merge_mode: Union[MergeMode, str] = MergeMode.SINGLE_PASS,
        seed: Optional[int] = None,
    ):
        """
        Initialize segmenter.

        Args:
            tolerance: Flood-fill color tolerance (>= 0)
            min_size: Minimum region size before merging (>= 0)
            color_scheme: Recoloring scheme
            merge_mode: Small-region merge strategy
            seed: Random seed for random-hue schemes
        """
        require(tolerance >= 0, "tolerance", tolerance, ErrorMessages.NON_NEGATIVE)
        require(min_size >= 0, "min_size", min_size, ErrorMessages.NON_NEGATIVE)
        self.tolerance = tolerance
        self.min_size = min_size
        self.color_scheme = color_scheme
        self.merge_mode = merge_mode
        self.seed = seed

    def segment(self, buffer: PixelBuffer) -> SegmentationResult:
        """
        Label, merge and recolor a buffer.

        Args:
            buffer: Source buffer

        Returns:
            SegmentationResult with the recolored buffer
        """
        regions = label_regions(buffer, self.tolerance)
        parent = merge_small_regions(regions, self.min_size, self.merge_mode)
        roots = ordered_roots(parent)

        # Merged region means, indexed by root
        merged_sizes = np.bincount(parent, weights=regions.sizes, minlength=regions.count)
        merged_sums = np.zeros_like(regions.sums)
        np.add.at(merged_sums, parent, regions.sums)
        region_means = _mean_colors(merged_sums, np.maximum(merged_sizes.astype(np.int64), 1))

        # preserveBrightness keeps each root label's own fill mean
        scheme = resolve_scheme(self.color_scheme)
        means = region_means if scheme == ColorScheme.MEAN else regions.means
        colors = assign_colors(roots, means, scheme, self.seed)

        palette = np.zeros((regions.count, 3), dtype=np.uint8)
        for root, color in colors.items():
            palette[root] = color
        result = buffer.to_array()
        result[:, :, :3] = palette[parent][regions.labels]

        logger.debug(
            f"Segmented {buffer}: {regions.count} regions, {len(roots)} after merging "
            f"(tolerance={self.tolerance}, min_size={self.min_size})"
        )
        return SegmentationResult(
            buffer=buffer.with_data(result),
            labels=regions.labels,
            sizes=regions.sizes,
            means=regions.means,
            parent=parent,
            roots=roots,
            colors=colors,
        )


def segment_regions(
    buffer: PixelBuffer,
    tolerance: float,
    min_size: int,
    color_scheme: Union[ColorScheme, str] = ColorScheme.RAINBOW,
    merge_mode: Union[MergeMode, str] = MergeMode.SINGLE_PASS,
    seed: Optional[int] = None,
) -> SegmentationResult:
    """Segment a buffer and return the full bookkeeping."""
    return RegionSegmenter(tolerance, min_size, color_scheme, merge_mode, seed).segment(buffer)


def apply_segmentation(
    buffer: PixelBuffer,
    tolerance: float,
    min_size: int,
    color_scheme: Union[ColorScheme, str] = ColorScheme.RAINBOW,
    merge_mode: Union[MergeMode, str] = MergeMode.SINGLE_PASS,
    seed: Optional[int] = None,
) -> PixelBuffer:
    """
    Recolor connected regions of similar color.

    Args:
        buffer: Source buffer
        tolerance: Flood-fill tolerance (>= 0; hosts use 5-50)
        min_size: Minimum region size (>= 0; hosts use 10-500)
        color_scheme: rainbow, pastel, grayscale, highContrast,
            preserveBrightness or mean; unknown names behave as rainbow
        merge_mode: single_pass (default) or fixed_point
        seed: Random seed for preserveBrightness

    Returns:
        Recolored buffer, alpha unchanged
    """
    return segment_regions(buffer, tolerance, min_size, color_scheme, merge_mode, seed).buffer
