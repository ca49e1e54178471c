# -*- coding: utf-8 -*-
"""
Classes associated with the creation, keeping and editing of log entries for a
noise loading run.
"""
import os
import errno
import time
from typing import List, Tuple, Union

from RaNoPy.errors import Status


class Log:
    """
    Class to handle creation, modification and storage of log entries. A Log
    without a filename keeps its entries in memory only.
    """

    @classmethod
    def combine_logs(cls, log1: 'Log', log2: 'Log',
                     filename: Union[None, str],
                     delete_old_logs: bool) -> 'Log':
        """
        Combine two separate logs in to one log with time-sorted entries.
        Writes all previous entries in that order, to new file.

        Parameters
        ----------
        log1 : Log
            First log to combine
        log2 : Log
            Second log to combine
        filename : str
            Full path to new log file, or None for an in-memory log
        delete_old_logs : bool
            Whether to delete old log files

        Returns
        -------
        New Log instance.

        """
        # Remove old log files if same as new log file, or if requested
        for logfile in (log1.filename, log2.filename):
            if logfile is None:
                continue
            if delete_old_logs or filename == logfile:
                if os.path.exists(logfile):
                    os.remove(logfile)

        # Time sort combined log entries of log1 and log2
        rts = [(log1.entries[k], log1.entries[k].rtime) for k in log1.entries]
        rts += [(log2.entries[k], log2.entries[k].rtime) for k in log2.entries]
        rts = sorted(rts, key=lambda x: x[1])

        all_entries = {n + 1: rt[0] for n, rt in enumerate(rts)}

        # new_log is verbose if either of log1 or log2 is verbose
        new_log = cls(filename, verbose=True in (log1.verbose, log2.verbose))

        # Write all entries from logs to file
        new_log.entries = all_entries
        for n in new_log.entries:
            new_log.write_entry(new_log.entries[n])

        return new_log

    def __init__(self, fname: Union[None, str], verbose: bool = True):
        """
        Parameters
        ----------
        fname : str
            Full path to log file. If None, entries are not written to disk
        verbose : bool
            Whether to print log entries verbosely.
        """
        self._entries = {}
        self._filename = fname
        self._verbose = verbose

    def __str__(self):
        es = []
        for entry_num in range(1, len(self.entries) + 1):
            es.append(self.entries[entry_num].__str__())

        return '\n'.join(es)

    @property
    def filename(self):
        return self._filename

    @property
    def verbose(self):
        return self._verbose

    @verbose.setter
    def verbose(self, new_verbosity):
        self._verbose = new_verbosity

    @property
    def entries(self):
        return self._entries

    @entries.setter
    def entries(self, new_entries):
        self._entries = new_entries

    def messages(self, mtype: Union[None, str] = None) -> List[str]:
        """
        Messages of all entries, in order of entry, optionally only those of
        type mtype
        """
        return [self.entries[n].message for n in sorted(self.entries)
                if mtype is None or
                self.entries[n].mtype.upper() == mtype.upper()]

    def add_entry(self, mtype: str, entry: str, timestamp: bool = True) -> None:
        """
        Add entry to log

        Parameters
        ----------
        mtype : str
            Log entry type (info, error or warning only)
        entry: str
            Message to enter into log
        timestamp: bool
            Whether to include the timestamp in the log entry
        Returns
        -------
        None.
        """
        if self.filename is not None:
            dcy = os.path.dirname(os.path.abspath(self.filename))
            if not os.path.exists(dcy):
                # Raise FileNotFoundError (subclass of builtin OSError)
                raise FileNotFoundError(errno.ENOTDIR,
                                        os.strerror(errno.ENOTDIR), dcy)

            if not os.path.exists(self.filename):
                open(self.filename, 'w').close()

        new_entry = Entry(mtype, entry, timestamp)
        self.entries[len(self._entries) + 1] = new_entry

        if self.verbose:
            print(new_entry)

        self.write_entry(new_entry)

    def add_status(self, status: Status, stage: str) -> bool:
        """
        Add an ERROR entry naming the failing stage if status has failed

        Returns
        -------
        Whether an entry was added
        """
        if not status.failed:
            return False

        self.add_entry("ERROR", "{} ({}).".format(stage, status))

        return True

    def write_entry(self, entry):
        if self.filename is None:
            return

        if not os.path.exists(self.filename):
            prefix = ''
        else:
            with open(self.filename, 'rt') as f:
                existing_lines = f.readlines()
                if len(existing_lines) == 0:
                    prefix = ''
                else:
                    prefix = '\n'
        with open(self.filename, 'at+') as f:
            f.write(prefix + entry.__str__())


class EntryMetaClass(type):
    def __init__(cls, *args, **kwargs):
        super().__init__(*args, **kwargs)
        cls._valid_mtypes = ("INFO", "ERROR", "WARNING")
        cls._mtype_max_len = max([len(_) for _ in cls.valid_mtypes])

    @property
    def valid_mtypes(cls):
        return cls._valid_mtypes

    @valid_mtypes.setter
    def valid_mtypes(cls, mtypes: Tuple):
        cls._valid_mtypes = mtypes

    @property
    def mtype_max_len(cls):
        return cls._mtype_max_len

    @mtype_max_len.setter
    def mtype_max_len(cls, max_len: int):
        cls._mtype_max_len = max_len


class Entry(metaclass=EntryMetaClass):
    """
    Entry class for use with Log class
    """
    def __init__(self, mtype: str, entry: str, timestamp: bool = True):
        """
        Parameters
        ----------
        mtype : str
            Message type. One of 'INFO', 'ERROR' or 'WARNING' (any case)
        entry: str
            Entry message
        timestamp: bool
            Whether to include the timestamp in the log entry string
        Returns
        -------
        None.

        """
        if not isinstance(mtype, str):
            raise TypeError("mtype must be a str")

        if not isinstance(entry, str):
            raise TypeError("entry must be a str")

        if mtype.upper() not in Entry.valid_mtypes:
            raise TypeError("mtype must be one of '" +
                            "', '".join(Entry.valid_mtypes[:-1]) + "' or '" +
                            Entry.valid_mtypes[-1] + "'")

        self._rtime = time.time()  # Time of entry recording (precision)
        self._mtime = time.localtime()  # Time to be displayed in message
        self._mtype = mtype.upper()
        self._message = entry
        self.timestamp = timestamp

    def __repr__(self):
        s = "Entry(mtype={}, entry={}, timestamp={})"
        return s.format(self.mtype.__repr__(), self.message.__repr__(),
                        self.timestamp)

    def __str__(self):
        preamble = ' '
        if self.timestamp:
            preamble = ':: '.join([self.time_str(),
                                   format(self.mtype,
                                   str(Entry.mtype_max_len))])

        fmt_message = self.message.split('\n')
        fmt_message = [': '.join([preamble, m]) for m in fmt_message]

        return '\n'.join(fmt_message)

    @property
    def rtime(self):
        return self._rtime

    @property
    def message(self):
        return self._message

    @property
    def mtype(self):
        return self._mtype

    @property
    def mtime(self):
        return self._mtime

    def time_str(self, fmt='%d%B%Y-%H:%M:%S'):
        return time.strftime(fmt, self.mtime).upper()
