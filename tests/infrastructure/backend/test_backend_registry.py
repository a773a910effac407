import unittest

from tapegrad.domain import Device, DeviceNotSupportedError
from tapegrad.infrastructure.backend import (
    NumpyBackend,
    get_backend,
    list_devices,
    register_backend,
    unregister_backend,
)


class TestBackendRegistry(unittest.TestCase):
    def tearDown(self) -> None:
        unregister_backend("cuda:7")

    def test_cpu_registered_on_import(self) -> None:
        ops = get_backend("cpu")
        self.assertIsInstance(ops, NumpyBackend)
        self.assertEqual(list_devices()[0], "cpu")

    def test_unknown_device_raises(self) -> None:
        with self.assertRaises(DeviceNotSupportedError) as cm:
            get_backend(Device("cuda:7"), "matmul")
        self.assertEqual(cm.exception.op, "matmul")
        self.assertEqual(cm.exception.device, "cuda:7")

    def test_register_and_unregister(self) -> None:
        ops = NumpyBackend(Device("cuda:7"))
        register_backend("cuda:7", ops)
        self.assertIs(get_backend("cuda:7"), ops)
        self.assertIn("cuda:7", list_devices())
        unregister_backend("cuda:7")
        self.assertNotIn("cuda:7", list_devices())

    def test_register_rejects_device_mismatch(self) -> None:
        with self.assertRaises(ValueError):
            register_backend("cuda:7", NumpyBackend(Device("cuda:6")))

    def test_register_rejects_non_backend(self) -> None:
        with self.assertRaises(TypeError):
            register_backend("cuda:7", object())  # type: ignore[arg-type]

    def test_cpu_cannot_be_unregistered(self) -> None:
        with self.assertRaises(ValueError):
            unregister_backend("cpu")


if __name__ == "__main__":
    unittest.main()
