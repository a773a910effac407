import unittest

from tapegrad.domain.device import Device, DeviceType, as_device


class TestDevice(unittest.TestCase):
    def test_cpu_parses(self) -> None:
        d = Device("cpu")
        self.assertIs(d.type, DeviceType.CPU)
        self.assertIsNone(d.index)
        self.assertTrue(d.is_cpu())
        self.assertFalse(d.is_cuda())
        self.assertEqual(str(d), "cpu")

    def test_cuda_parses_index(self) -> None:
        d = Device("cuda:3")
        self.assertIs(d.type, DeviceType.CUDA)
        self.assertEqual(d.index, 3)
        self.assertTrue(d.is_cuda())
        self.assertEqual(str(d), "cuda:3")
        self.assertEqual(repr(d), "Device('cuda:3')")

    def test_invalid_strings_raise(self) -> None:
        for bad in ("gpu", "cuda", "cuda:-1", "cuda:x", "CPU", ""):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    Device(bad)

    def test_equality_and_hash(self) -> None:
        self.assertEqual(Device("cuda:0"), Device("cuda:0"))
        self.assertNotEqual(Device("cuda:0"), Device("cuda:1"))
        self.assertNotEqual(Device("cpu"), Device("cuda:0"))
        table = {Device("cpu"): "a", Device("cuda:1"): "b"}
        self.assertEqual(table[Device("cuda:1")], "b")

    def test_slots_block_new_attributes(self) -> None:
        with self.assertRaises(AttributeError):
            Device("cpu").foo = 1  # type: ignore[attr-defined]


class TestAsDevice(unittest.TestCase):
    def test_passes_device_through(self) -> None:
        d = Device("cuda:0")
        self.assertIs(as_device(d), d)

    def test_parses_string(self) -> None:
        self.assertEqual(as_device("cpu"), Device("cpu"))

    def test_rejects_other_types(self) -> None:
        with self.assertRaises(TypeError):
            as_device(0)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
