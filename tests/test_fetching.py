import unittest
from unittest import mock

import requests

from scripts.fetching import FetchError, Fetcher, run_in_batches


def response(status=200, text="<html></html>", history=(), encoding="utf-8"):
    r = mock.Mock()
    r.status_code = status
    r.reason = "Not Found" if status == 404 else "OK"
    r.text = text
    r.history = list(history)
    r.encoding = encoding
    r.apparent_encoding = "utf-8"
    return r


class FetcherTests(unittest.TestCase):
    def test_returns_body(self):
        session = mock.Mock()
        session.get.return_value = response(text="<p>ok</p>")
        self.assertEqual(Fetcher(session).fetch("https://x.com/", timeout=5), "<p>ok</p>")
        self.assertEqual(session.get.call_args.kwargs["timeout"], 5)

    def test_non_2xx_raises(self):
        session = mock.Mock()
        session.get.return_value = response(status=404)
        with self.assertRaises(FetchError) as ctx:
            Fetcher(session).fetch("https://x.com/missing")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_timeout_raises(self):
        session = mock.Mock()
        session.get.side_effect = requests.Timeout("slow")
        with self.assertRaises(FetchError):
            Fetcher(session).fetch("https://x.com/")

    def test_redirect_bound(self):
        session = mock.Mock()
        session.get.return_value = response(history=[object()] * 3)
        fetcher = Fetcher(session, max_redirects=5)
        self.assertEqual(fetcher.fetch("https://x.com/"), "<html></html>")
        with self.assertRaises(FetchError):
            fetcher.fetch("https://x.com/", max_redirects=2)


class BatchTests(unittest.TestCase):
    def test_results_keep_order_and_failures_become_none(self):
        def work(n):
            if n == 3:
                raise FetchError("https://x.com/3", "HTTP 500")
            return n * 10

        self.assertEqual(run_in_batches(work, range(1, 6), batch_size=2, delay=0), [10, 20, None, 40, 50])

    def test_empty_input(self):
        self.assertEqual(run_in_batches(lambda n: n, [], delay=0), [])


if __name__ == "__main__":
    unittest.main()
