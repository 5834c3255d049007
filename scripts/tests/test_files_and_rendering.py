"""
Unit tests for coordinate files, result files, rendering and the CLI.
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from page_fitting.animation import ClusterAnimator
from page_fitting.coordinate_file import (
    load_coordinates,
    load_pages,
    parse_coordinate_line,
    save_coordinates,
    save_pages,
)
from page_fitting.errors import ErrorKind, PageFitError
from page_fitting.fitting import fit_pages
from page_fitting.output import print_fit_stats
from page_fitting.page import Page
from page_fitting.render import (
    BACKGROUND_COLOUR,
    CENTROID_COLOUR,
    PAGE_BOUNDS_COLOUR,
    ClusterRenderer,
    MapTransform,
)
from page_fitting.types import Coordinate, FitStats, Orientation, PageRecord, PageSpec, Rect

import fit_route_pages


class TempDirTestCase(unittest.TestCase):
    """Provides a scratch directory per test."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, text):
        path = self.tmp / name
        path.write_text(text, encoding="utf-8")
        return path


class TestParseCoordinateLine(unittest.TestCase):
    """Tests for single line parsing."""

    def test_simple(self):
        """A plain comma separated pair parses."""
        self.assertEqual(parse_coordinate_line("1.5,2.5", 1), Coordinate(1.5, 2.5))

    def test_whitespace_stripped(self):
        """Whitespace around fields is ignored."""
        self.assertEqual(parse_coordinate_line("  -3 , 4e3 \t", 1), Coordinate(-3.0, 4000.0))

    def test_custom_delimiter(self):
        """A custom delimiter splits the fields."""
        self.assertEqual(parse_coordinate_line("1;2", 1, ";"), Coordinate(1.0, 2.0))

    def test_wrong_field_count(self):
        """Three fields are a parse failure naming the line."""
        with self.assertRaises(PageFitError) as ctx:
            parse_coordinate_line("1,2,3", 7)
        self.assertEqual(ctx.exception.kind, ErrorKind.PARSE_FAILURE)
        self.assertEqual(ctx.exception.subject, 7)

    def test_not_a_number(self):
        """A non-numeric field is a parse failure naming the text."""
        with self.assertRaises(PageFitError) as ctx:
            parse_coordinate_line("abc,2", 3)
        self.assertEqual(ctx.exception.kind, ErrorKind.PARSE_FAILURE)
        self.assertEqual(ctx.exception.subject, 3)
        self.assertIn("abc", str(ctx.exception))


class TestCoordinateFile(TempDirTestCase):
    """Tests for reading and writing route files."""

    def test_round_trip_full_precision(self):
        """Floats survive a save and load unchanged."""
        original = [
            Coordinate(0.1, 1.0 / 3.0),
            Coordinate(-123456.789e3, 1e-300),
            Coordinate(512345.123456789, 6789012.987654321),
        ]
        path = self.tmp / "route.txt"
        save_coordinates(path, original)
        self.assertEqual(load_coordinates(path), original)

    def test_written_format(self):
        """Each coordinate is written as one repr pair per line."""
        path = self.tmp / "route.txt"
        save_coordinates(path, [Coordinate(1.5, 2.0), Coordinate(3.0, 4.25)])
        self.assertEqual(path.read_text(encoding="utf-8"), "1.5,2.0\n3.0,4.25\n")

    def test_round_trip_custom_delimiter(self):
        """Tab separated files round trip."""
        original = [Coordinate(1.0, 2.0), Coordinate(3.0, 4.0)]
        path = self.tmp / "route.tsv"
        save_coordinates(path, original, "\t")
        self.assertEqual(path.read_text(encoding="utf-8"), "1.0\t2.0\n3.0\t4.0\n")
        self.assertEqual(load_coordinates(path, "\t"), original)

    def test_trailing_blank_lines_tolerated(self):
        """Blank lines and padding are skipped."""
        path = self.write("route.txt", "  1.5, 2.5  \n3,4\n\n")
        self.assertEqual(load_coordinates(path), [Coordinate(1.5, 2.5), Coordinate(3.0, 4.0)])

    def test_parse_error_reports_line(self):
        """A bad line is reported by its 1-based number."""
        path = self.write("route.txt", "1,2\nabc,3\n")
        with self.assertRaises(PageFitError) as ctx:
            load_coordinates(path)
        self.assertEqual(ctx.exception.kind, ErrorKind.PARSE_FAILURE)
        self.assertEqual(ctx.exception.subject, 2)

    def test_missing_file(self):
        """A missing route file is an IO failure."""
        with self.assertRaises(PageFitError) as ctx:
            load_coordinates(self.tmp / "missing.txt")
        self.assertEqual(ctx.exception.kind, ErrorKind.IO_FAILURE)

    def test_unwritable_path(self):
        """A path in a missing directory cannot be written."""
        with self.assertRaises(PageFitError) as ctx:
            save_coordinates(self.tmp / "no-such-dir" / "route.txt", [Coordinate(0.0, 0.0)])
        self.assertEqual(ctx.exception.kind, ErrorKind.IO_FAILURE)


class TestResultFile(TempDirTestCase):
    """Tests for the page result file."""

    def test_fields_and_orientation_flag(self):
        """Pages are written as x, y, id, landscape flag and scale."""
        pages = fit_pages([Coordinate(0.0, 0.0), Coordinate(9000.0, 0.0)], PageSpec.a3(25000.0), seed=42)
        path = self.tmp / "clusters.txt"
        save_pages(path, pages)

        lines = path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines, ["4500.0,0.0,A3,true,25000.0"])

    def test_portrait_flag(self):
        """Portrait records carry the false flag."""
        record = PageRecord(1.0, 2.0, "A4", Orientation.PORTRAIT, 10000.0)
        path = self.tmp / "clusters.txt"
        save_pages(path, [record], ";")
        self.assertEqual(path.read_text(encoding="utf-8"), "1.0;2.0;A4;false;10000.0\n")

    def test_one_line_per_page_in_order(self):
        """Result lines follow page order and read back as records."""
        route = [Coordinate(100000.0, 0.0), Coordinate(0.0, 0.0)]
        pages = fit_pages(route, PageSpec.a3(25000.0), seed=42)
        path = self.tmp / "clusters.txt"
        save_pages(path, pages)

        records = load_pages(path)
        self.assertEqual(records, [p.to_record() for p in pages])
        self.assertEqual(records[0].centre_x, 100000.0)
        self.assertEqual(records[1].centre_x, 0.0)

    def test_bad_orientation_flag(self):
        """An unknown orientation flag is a parse failure."""
        path = self.write("clusters.txt", "1.0,2.0,A3,maybe,25000\n")
        with self.assertRaises(PageFitError) as ctx:
            load_pages(path)
        self.assertEqual(ctx.exception.kind, ErrorKind.PARSE_FAILURE)
        self.assertEqual(ctx.exception.subject, 1)

    def test_wrong_field_count(self):
        """A short line is reported by its line number."""
        path = self.write("clusters.txt", "1.0,2.0,A3,true,25000\n1.0,2.0\n")
        with self.assertRaises(PageFitError) as ctx:
            load_pages(path)
        self.assertEqual(ctx.exception.subject, 2)


class TestMapTransform(unittest.TestCase):
    """Tests for map to image conversion."""

    def test_uniform_scale_fits_smaller_ratio(self):
        """The smaller axis ratio sets the uniform scale."""
        transform = MapTransform.to_bounds(Rect(0.0, 0.0, 100.0, 50.0), 200, 200)
        self.assertEqual(transform.scale, 2.0)

    def test_y_axis_flipped(self):
        """Map y grows upwards while image y grows downwards."""
        transform = MapTransform.to_bounds(Rect(0.0, 0.0, 100.0, 50.0), 200, 200)
        self.assertEqual(transform.to_image(Coordinate(0.0, 50.0)), (0.0, 0.0))
        self.assertEqual(transform.to_image(Coordinate(100.0, 0.0)), (200.0, 100.0))

    def test_rect_to_image(self):
        """Rectangles map to pixel boxes."""
        transform = MapTransform.to_bounds(Rect(0.0, 0.0, 100.0, 50.0), 200, 200)
        self.assertEqual(transform.rect_to_image(Rect(0.0, 0.0, 100.0, 50.0)), (0.0, 0.0, 200.0, 100.0))

    def test_degenerate_axis_ignored(self):
        """A zero-height axis does not limit the scale."""
        transform = MapTransform.to_bounds(Rect(0.0, 0.0, 100.0, 0.0), 200, 80)
        self.assertEqual(transform.scale, 2.0)

    def test_point_bounds(self):
        """A single-point view falls back to unit scale."""
        transform = MapTransform.to_bounds(Rect(5.0, 5.0, 0.0, 0.0), 200, 80)
        self.assertEqual(transform.scale, 1.0)


class TestClusterRenderer(unittest.TestCase):
    """Tests for drawing a page onto a frame."""

    def setUp(self):
        self.renderer = ClusterRenderer((200, 200), Rect(0.0, 0.0, 100.0, 50.0))
        self.page = Page(Coordinate(50.0, 25.0), PageSpec(10.0, 20.0, 1.0, "T"))

    def test_blank_frame(self):
        """A new frame is blank at the requested size."""
        image = self.renderer.image
        self.assertEqual(image.size, (200, 200))
        self.assertEqual(image.getpixel((10, 10)), BACKGROUND_COLOUR)

    def test_render_page(self):
        """The page outline and centre are drawn."""
        self.renderer.render(self.page, (0, 0, 255))
        image = self.renderer.image
        self.assertEqual(image.getpixel((100, 50)), CENTROID_COLOUR)
        self.assertEqual(image.getpixel((90, 50)), PAGE_BOUNDS_COLOUR)
        self.assertEqual(image.getpixel((199, 199)), BACKGROUND_COLOUR)

    def test_render_points_in_page_colour(self):
        """Assigned points use the page colour."""
        self.page.points.append(Coordinate(20.0, 40.0))
        self.renderer.render(self.page, (0, 0, 255))
        self.assertEqual(self.renderer.image.getpixel((40, 20)), (0, 0, 255))


class TestClusterAnimator(TempDirTestCase):
    """Tests for the GIF listener."""

    def setUp(self):
        super().setUp()
        self.route = [Coordinate(0.0, 0.0), Coordinate(100000.0, 0.0)]

    def test_writes_gif(self):
        """A fit produces one frame per update and a GIF on disk."""
        path = self.tmp / "fit.gif"
        animator = ClusterAnimator(path, self.route, 120, 80)
        fit_pages(self.route, PageSpec.a3(25000.0), listener=animator, seed=42)

        self.assertEqual(len(animator.frames), 3)
        self.assertTrue(path.exists())
        with Image.open(path) as gif:
            self.assertEqual(gif.format, "GIF")
            self.assertEqual(gif.size, (120, 80))

    def test_colours_repeat_between_animators(self):
        """Colours come from the fixed seed, so frames match."""
        pages = fit_pages(self.route, PageSpec.a3(25000.0), seed=42)
        first = ClusterAnimator(self.tmp / "a.gif", self.route, 60, 40)
        second = ClusterAnimator(self.tmp / "b.gif", self.route, 60, 40)
        first.updated(pages)
        second.updated(pages)
        self.assertEqual(first.frames[0].tobytes(), second.frames[0].tobytes())

    def test_update_after_finish_rejected(self):
        """Finish is idempotent and later updates fail."""
        animator = ClusterAnimator(self.tmp / "fit.gif", self.route, 60, 40)
        animator.updated([])
        animator.finished()
        animator.finished()
        with self.assertRaises(PageFitError) as ctx:
            animator.updated([])
        self.assertEqual(ctx.exception.kind, ErrorKind.IO_FAILURE)

    def test_no_frames_no_file(self):
        """Without frames no file is written."""
        path = self.tmp / "fit.gif"
        animator = ClusterAnimator(path, self.route, 60, 40)
        animator.finished()
        self.assertFalse(path.exists())

    def test_frames_stored_in_palette_mode(self):
        """Each update is kept as a palette image at the frame size."""
        animator = ClusterAnimator(self.tmp / "fit.gif", self.route, 60, 40)
        animator.updated(fit_pages(self.route, PageSpec.a3(25000.0), seed=42))
        self.assertEqual(animator.frames[0].mode, "P")
        self.assertEqual(animator.frames[0].size, (60, 40))

    def test_missing_directory_rejected_up_front(self):
        """A GIF path in a missing directory fails before any frame is drawn."""
        with self.assertRaises(PageFitError) as ctx:
            ClusterAnimator(self.tmp / "missing" / "fit.gif", self.route, 60, 40)
        self.assertEqual(ctx.exception.kind, ErrorKind.IO_FAILURE)

    def test_write_failure(self):
        """A directory removed during the fit surfaces as IO_FAILURE on finish."""
        out_dir = self.tmp / "out"
        out_dir.mkdir()
        animator = ClusterAnimator(out_dir / "fit.gif", self.route, 60, 40)
        animator.updated([])
        out_dir.rmdir()
        with self.assertRaises(PageFitError) as ctx:
            animator.finished()
        self.assertEqual(ctx.exception.kind, ErrorKind.IO_FAILURE)


class TestOutput(unittest.TestCase):
    """Tests for console reporting."""

    def test_print_fit_stats(self):
        """The summary lists counts and density."""
        stats = FitStats(
            coordinate_count=50,
            page_count=5,
            landscape_count=2,
            empty_page_count=0,
            outer_iterations=5,
            refinement_steps=50,
        )
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            print_fit_stats(stats, "route")
        text = buffer.getvalue()
        self.assertIn("route: Pages: 5", text)
        self.assertIn("Landscape pages: 2", text)
        self.assertIn("Pages per 100 coordinates: 10.0", text)


class TestCommandLine(TempDirTestCase):
    """Tests for the fit_route_pages entry point."""

    def run_main(self, *args):
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer), contextlib.redirect_stderr(buffer):
            code = fit_route_pages.main([str(a) for a in args])
        return code, buffer.getvalue()

    def test_fit_route_file(self):
        """The CLI fits a route file and writes page records."""
        route = self.write("route.txt", "0,0\n100000,0\n")
        output = self.tmp / "pages.txt"

        code, text = self.run_main(route, output, "--seed", "42")

        self.assertEqual(code, 0)
        self.assertIn("Done!", text)
        records = load_pages(output)
        self.assertEqual(len(records), 2)
        self.assertEqual(records[0].page_id, "A3")

    def test_default_output_name(self):
        """The result file defaults to <stem>-clusters.txt."""
        route = self.write("route.txt", "0,0\n")
        code, _ = self.run_main(route, "--page", "A4", "--scale", "10000", "--seed", "1")
        self.assertEqual(code, 0)
        records = load_pages(self.tmp / "route-clusters.txt")
        self.assertEqual(records[0].page_id, "A4")
        self.assertEqual(records[0].scale, 10000.0)

    def test_animation_flag(self):
        """--animation writes a GIF next to the result."""
        route = self.write("route.txt", "0,0\n5000,0\n")
        gif = self.tmp / "fit.gif"
        code, _ = self.run_main(
            route, self.tmp / "pages.txt", "--animation", gif, "--width", "100", "--height", "60"
        )
        self.assertEqual(code, 0)
        self.assertTrue(gif.exists())

    def test_missing_input(self):
        """A missing input file exits with status 1."""
        code, text = self.run_main(self.tmp / "nope.txt")
        self.assertEqual(code, 1)
        self.assertIn("not found", text)

    def test_malformed_input(self):
        """A malformed route exits with the parse error."""
        route = self.write("route.txt", "0,0\nbad line\n")
        code, text = self.run_main(route)
        self.assertEqual(code, 1)
        self.assertIn("PARSE_FAILURE", text)

    def test_invalid_iterations(self):
        """Invalid iteration counts are rejected."""
        route = self.write("route.txt", "0,0\n")
        code, text = self.run_main(route, "--iterations", "0")
        self.assertEqual(code, 1)
        self.assertIn("refinement_iterations", text)

    def test_animation_directory_missing(self):
        """A GIF path in a missing directory fails before fitting."""
        route = self.write("route.txt", "0,0\n")
        code, text = self.run_main(route, "--animation", self.tmp / "missing" / "fit.gif")
        self.assertEqual(code, 1)
        self.assertIn("IO_FAILURE", text)


if __name__ == "__main__":
    unittest.main()
