import dataclasses
import math
import unittest

from src.raymarch.color import BLUE, GREEN, RED, WHITE, Color
from src.raymarch.errors import DegenerateGeometryError, EmptySceneError
from src.raymarch.scene import Light, Ray, Scene, Sphere
from src.raymarch.vector import Vec3


class VectorTests(unittest.TestCase):
    def test_basic_operations(self) -> None:
        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(-2.0, 0.5, 4.0)
        self.assertEqual(a.add(b), Vec3(-1.0, 2.5, 7.0))
        self.assertEqual(a.sub(b), Vec3(3.0, 1.5, -1.0))
        self.assertEqual(a.scale(2.0), Vec3(2.0, 4.0, 6.0))
        self.assertEqual(a.dot(b), 11.0)
        self.assertEqual(a.dotself(), 14.0)
        self.assertEqual(a + b, a.add(b))
        self.assertEqual(a - b, a.sub(b))
        self.assertEqual(2.0 * a, a * 2.0)
        self.assertEqual(-a, Vec3(-1.0, -2.0, -3.0))

    def test_magnitude(self) -> None:
        self.assertEqual(Vec3(3.0, 4.0, 0.0).magnitude(), 5.0)
        self.assertEqual(Vec3.zero().magnitude(), 0.0)

    def test_normalize_gives_unit_length(self) -> None:
        for vector in (
            Vec3(2.0, 0.0, 0.0),
            Vec3(1.0, 1.0, 1.0),
            Vec3(-3.0, 7.5, 0.25),
            Vec3(1e-6, -2e-6, 3e-6),
            Vec3(1e6, 1e6, -1e6),
        ):
            self.assertAlmostEqual(vector.normalize().magnitude(), 1.0, places=12)

    def test_normalize_zero_vector_fails(self) -> None:
        with self.assertRaises(DegenerateGeometryError):
            Vec3.zero().normalize()
        # Still a ValueError for callers that do not know the taxonomy.
        with self.assertRaises(ValueError):
            Vec3(0.0, 0.0, 0.0).normalize()

    def test_vectors_are_immutable(self) -> None:
        vector = Vec3(1.0, 2.0, 3.0)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            vector.x = 5.0  # type: ignore[misc]
        vector.scale(10.0)
        self.assertEqual(vector, Vec3(1.0, 2.0, 3.0))

    def test_scalar_multiplication_only(self) -> None:
        with self.assertRaises(TypeError):
            Vec3(1.0, 1.0, 1.0) * Vec3(1.0, 1.0, 1.0)  # type: ignore[operator]


class ColorTests(unittest.TestCase):
    def test_palette_constants(self) -> None:
        self.assertEqual(WHITE, Color(1.0, 1.0, 1.0))
        self.assertEqual(RED, Color(1.0, 0.0, 0.0))
        self.assertEqual(GREEN, Color(0.0, 1.0, 0.0))
        self.assertEqual(BLUE, Color(0.0, 0.0, 1.0))

    def test_add_is_not_clamped(self) -> None:
        total = WHITE.add(WHITE).add(RED)
        self.assertEqual(total, Color(3.0, 2.0, 2.0))
        self.assertAlmostEqual(total.brightness(), 7.0 / 3.0)

    def test_scale(self) -> None:
        self.assertEqual(RED.scale(0.3), Color(0.3, 0.0, 0.0))


class SphereTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sphere = Sphere(Vec3(1.0, -2.0, 10.0), 3.0, RED)

    def test_distance_is_zero_on_surface(self) -> None:
        for direction in (
            Vec3(1.0, 0.0, 0.0),
            Vec3(0.0, -1.0, 0.0),
            Vec3(1.0, 1.0, 1.0),
            Vec3(-0.3, 0.8, -2.0),
        ):
            point = self.sphere.center.add(direction.normalize().scale(self.sphere.radius))
            self.assertAlmostEqual(self.sphere.distance(point), 0.0, places=12)

    def test_distance_is_exact_euclidean_gap(self) -> None:
        sphere = Sphere(Vec3(0.0, 0.0, 50.0), 5.0, RED)
        self.assertEqual(sphere.distance(Vec3(0.0, 0.0, 0.0)), 45.0)
        self.assertEqual(sphere.distance(Vec3(0.0, 0.0, 50.0)), -5.0)
        self.assertAlmostEqual(sphere.distance(Vec3(3.0, 4.0, 50.0)), 0.0)

    def test_normal_points_outwards(self) -> None:
        normal = self.sphere.normal(Vec3(1.0, -2.0, 7.0))
        self.assertEqual((normal.x, normal.y), (0.0, 0.0))
        self.assertAlmostEqual(normal.z, -1.0)

    def test_normal_at_centre_fails(self) -> None:
        with self.assertRaises(DegenerateGeometryError):
            self.sphere.normal(self.sphere.center)

    def test_radius_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            Sphere(Vec3(0.0, 0.0, 0.0), 0.0, RED)


class ShadingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0, RED)
        self.point = Vec3(0.0, 0.0, -1.0)

    def test_ambient_only_without_lights(self) -> None:
        self.assertEqual(self.sphere.shade(self.point, []), Color(0.3, 0.0, 0.0))

    def test_light_facing_surface(self) -> None:
        light = Light(Vec3(0.0, 0.0, -10.0), WHITE)
        color = self.sphere.shade(self.point, [light])
        self.assertAlmostEqual(color.r, 0.8)
        self.assertAlmostEqual(color.g, 0.5)
        self.assertAlmostEqual(color.b, 0.5)

    def test_light_behind_surface_contributes_nothing(self) -> None:
        light = Light(Vec3(0.0, 0.0, 10.0), WHITE)
        self.assertEqual(self.sphere.shade(self.point, [light]), Color(0.3, 0.0, 0.0))

    def test_lights_accumulate_without_clamping(self) -> None:
        lights = [Light(Vec3(0.0, 0.0, -10.0), WHITE), Light(Vec3(0.0, 0.0, -20.0), WHITE)]
        color = self.sphere.shade(self.point, lights)
        self.assertAlmostEqual(color.r, 1.3)
        self.assertAlmostEqual(color.g, 1.0)
        self.assertGreater(color.brightness(), 1.0)

    def test_shading_monotonic_in_alignment(self) -> None:
        previous = -1.0
        for degrees in range(90, -1, -5):
            radians = math.radians(degrees)
            offset = Vec3(math.sin(radians), 0.0, -math.cos(radians)).scale(10.0)
            light = Light(self.point.add(offset), WHITE)
            brightness = self.sphere.shade(self.point, [light]).brightness()
            self.assertGreaterEqual(brightness, previous - 1e-12)
            previous = brightness


class SceneTests(unittest.TestCase):
    def test_nearest_object(self) -> None:
        near = Sphere(Vec3(0.0, 0.0, 10.0), 1.0, RED)
        far = Sphere(Vec3(0.0, 0.0, 30.0), 1.0, RED)
        scene = Scene([far, near], [])
        obj, distance = scene.find_nearest(Vec3(0.0, 0.0, 0.0))
        self.assertIs(obj, near)
        self.assertEqual(distance, 9.0)

    def test_ties_prefer_first_object(self) -> None:
        first = Sphere(Vec3(1.0, 0.0, 0.0), 1.0, RED)
        second = Sphere(Vec3(-1.0, 0.0, 0.0), 1.0, BLUE)
        scene = Scene([first, second], [])
        for _ in range(3):
            obj, distance = scene.find_nearest(Vec3(0.0, 0.0, 0.0))
            self.assertIs(obj, first)
            self.assertEqual(distance, 0.0)

        reversed_scene = Scene([second, first], [])
        self.assertIs(reversed_scene.find_nearest(Vec3(0.0, 0.0, 0.0))[0], second)

    def test_empty_scene_has_no_nearest(self) -> None:
        scene = Scene([], [Light(Vec3(0.0, 0.0, 0.0), WHITE)])
        with self.assertRaises(EmptySceneError):
            scene.find_nearest(Vec3(0.0, 0.0, 0.0))

    def test_scene_is_read_only(self) -> None:
        objects = [Sphere(Vec3(0.0, 0.0, 10.0), 1.0, RED)]
        scene = Scene(objects, [])
        objects.append(Sphere(Vec3(0.0, 0.0, 20.0), 1.0, RED))
        self.assertEqual(len(scene), 1)
        self.assertIsInstance(scene.objects, tuple)


class RayTests(unittest.TestCase):
    def test_step_uses_unit_direction(self) -> None:
        ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, 200.0))
        stepped = ray.step(ray.origin, 45.0)
        self.assertEqual((stepped.x, stepped.y), (0.0, 0.0))
        self.assertAlmostEqual(stepped.z, 45.0)
        self.assertEqual(ray.direction, Vec3(0.0, 0.0, 200.0))

    def test_step_with_zero_direction_fails(self) -> None:
        ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3.zero())
        with self.assertRaises(DegenerateGeometryError):
            ray.step(ray.origin, 1.0)


if __name__ == "__main__":
    unittest.main()
