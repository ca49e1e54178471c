import unittest
import numpy as np
import dask.array as da
import RaNoPy.maths.dask.noise as dnoise
from RaNoPy.classes import DataType, Location, Mem, TelescopeModel
from RaNoPy.errors import ErrorCode, Status


def _telescope(rms_per_station, freqs=(100e6, 200e6)):
    status = Status()
    telescope = TelescopeModel(DataType.DOUBLE, Location.CPU,
                               len(rms_per_station))
    for station, rms in zip(telescope.station, rms_per_station):
        station.noise.frequency.copy_from(Mem.from_array(freqs), status)
        station.noise.rms.copy_from(Mem.from_array(rms), status)

    return telescope


class TestDaskSystemNoise(unittest.TestCase):
    def test_statistics(self):
        status = Status()
        telescope = _telescope([[1., 1.], [4., 4.], [9., 9.]])
        vis = da.zeros((3000, 1, 3, 2), dtype=np.complex128,
                       chunks=(500, 1, 3, 2))
        noisy = dnoise.add_system_noise(vis, telescope, [150e6], 11, status)
        self.assertFalse(status.failed)
        self.assertIsInstance(noisy, da.core.Array)
        self.assertEqual(noisy.chunks, vis.chunks)

        result = dnoise.compute_with_progress(noisy)
        self.assertEqual(result.dtype, np.complex128)
        expected = np.array([2., 3., 6.])
        np.testing.assert_allclose(result.real.std(axis=(0, 3))[0], expected,
                                   rtol=0.05)
        np.testing.assert_allclose(result.imag.std(axis=(0, 3))[0], expected,
                                   rtol=0.05)

    def test_reproducible_and_preserves_signal(self):
        telescope = _telescope([[1., 2.], [3., 4.]])
        vis = da.full((10, 2, 1), 5. + 5.j, dtype=np.complex64, chunks=5)
        results = []
        for _ in range(2):
            status = Status()
            noisy = dnoise.add_system_noise(vis, telescope, [100e6, 200e6], 2,
                                            status)
            self.assertFalse(status.failed)
            results.append(noisy.compute())
        np.testing.assert_array_equal(results[0], results[1])
        self.assertEqual(results[0].dtype, np.complex64)
        self.assertAlmostEqual(float(results[0].real.mean()), 5., delta=3.)

    def test_errors(self):
        telescope = _telescope([[1., 2.], [3., 4.]])
        status = Status()
        self.assertIsNone(dnoise.add_system_noise(
            da.zeros((2, 2, 1), chunks=1), telescope, [1e8, 2e8], 1, status
        ))
        self.assertEqual(status.code, ErrorCode.BAD_DATA_TYPE)

        status = Status()
        self.assertIsNone(dnoise.add_system_noise(
            da.zeros((2, 3, 1), dtype=complex, chunks=1), telescope,
            [1e8, 2e8], 1, status
        ))
        self.assertEqual(status.code, ErrorCode.DIMENSION_MISMATCH)

        status = Status()
        status.set(ErrorCode.FILE_IO)
        self.assertIsNone(dnoise.add_system_noise(
            da.zeros((2, 2, 1), dtype=complex, chunks=1), telescope,
            [1e8, 2e8], 1, status
        ))
        self.assertEqual(status.code, ErrorCode.FILE_IO)


if __name__ == '__main__':
    unittest.main()
