import os

import pytest

from rnaquant.distributed import transaction
from rnaquant.distributed.transaction import file_transaction, tx_tmpdir


@pytest.fixture
def config(tmp_path):
    return {'resources': {'tmp': {'dir': str(tmp_path / 'tmp')}}}


class TestTxTmpdir(object):

    def test_uses_configured_tmp_dir(self, config, tmp_path):
        with tx_tmpdir(config, str(tmp_path / 'out')) as tmp_dir:
            assert os.path.dirname(tmp_dir) == str(tmp_path / 'tmp')
            assert os.path.isdir(tmp_dir)
        assert not os.path.exists(tmp_dir)

    def test_falls_back_to_base_dir(self, tmp_path):
        with tx_tmpdir({}, str(tmp_path)) as tmp_dir:
            assert os.path.dirname(tmp_dir) == str(tmp_path / transaction.DEFAULT_TMP)

    def test_keeps_directory_when_asked(self, config, tmp_path):
        with tx_tmpdir(config, str(tmp_path), remove=False) as tmp_dir:
            pass
        assert os.path.isdir(tmp_dir)

    def test_removes_directory_on_error(self, config, tmp_path):
        with pytest.raises(ValueError):
            with tx_tmpdir(config, str(tmp_path)) as tmp_dir:
                raise ValueError('tool failed')
        assert not os.path.exists(tmp_dir)


class TestFileTransaction(object):

    def test_moves_finished_file(self, config, tmp_path):
        out_file = str(tmp_path / 'out' / 'result.txt')
        with file_transaction(config, out_file) as tx_out_file:
            assert tx_out_file != out_file
            with open(tx_out_file, 'w') as out_handle:
                out_handle.write('done')
            assert not os.path.exists(out_file)
        with open(out_file) as in_handle:
            assert in_handle.read() == 'done'
        assert not os.path.exists(out_file + '.rnaquanttmp')

    def test_multiple_files(self, config, tmp_path):
        out_files = [str(tmp_path / 'a.txt'), str(tmp_path / 'b.txt')]
        with file_transaction(config, out_files) as tx_files:
            assert len(tx_files) == 2
            for fname in tx_files:
                with open(fname, 'w') as out_handle:
                    out_handle.write('x')
        assert all(os.path.exists(x) for x in out_files)

    def test_leaves_no_output_on_error(self, config, tmp_path):
        out_file = str(tmp_path / 'result.txt')
        with pytest.raises(RuntimeError):
            with file_transaction(config, out_file) as tx_out_file:
                with open(tx_out_file, 'w') as out_handle:
                    out_handle.write('partial')
                raise RuntimeError('interrupted')
        assert not os.path.exists(out_file)

    def test_replaces_existing_directory(self, config, tmp_path):
        out_dir = tmp_path / 'sample'
        out_dir.mkdir()
        (out_dir / 'stale.txt').write_text('old')
        with file_transaction(config, str(out_dir)) as tx_out_dir:
            os.makedirs(tx_out_dir)
            with open(os.path.join(tx_out_dir, 'abundance.h5'), 'w') as out_handle:
                out_handle.write('h5')
        assert sorted(os.listdir(str(out_dir))) == ['abundance.h5']

    def test_without_config(self, tmp_path):
        out_file = str(tmp_path / 'result.txt')
        with file_transaction(out_file) as tx_out_file:
            assert os.path.dirname(os.path.dirname(tx_out_file)) == \
                str(tmp_path / transaction.DEFAULT_TMP)
            with open(tx_out_file, 'w') as out_handle:
                out_handle.write('done')
        assert os.path.exists(out_file)
