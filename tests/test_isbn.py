"""isbn モジュールのテスト"""

from shinsho.isbn import diff_isbns, to_isbn10


class TestDiffIsbns:
    """差分検出のテスト"""

    def test_returns_only_new_in_current_order(self):
        """前回にない ISBN だけが今回の順序で返ること"""
        previous = {"A", "B"}
        current = ["D", "A", "C", "B"]

        assert diff_isbns(previous, current) == ["D", "C"]

    def test_empty_previous_returns_current(self):
        """初回（前回が空）は今回の全件が返ること"""
        current = ["A", "B", "C"]

        assert diff_isbns(set(), current) == current

    def test_empty_current(self):
        """今回が空なら空"""
        assert diff_isbns({"A"}, []) == []

    def test_accepts_list_previous(self):
        """前回がリストでも動くこと"""
        assert diff_isbns(["A"], ["A", "B"]) == ["B"]

    def test_result_is_subsequence_without_previous(self):
        """結果は今回の部分列で、前回の要素を含まないこと"""
        previous = {"2", "4", "6"}
        current = [str(i) for i in range(10)]

        result = diff_isbns(previous, current)

        assert not set(result) & previous
        assert result == [x for x in current if x in result]


class TestToIsbn10:
    """ISBN-10 変換のテスト"""

    def test_known_isbn(self):
        """岩波新書の既知 ISBN"""
        assert to_isbn10("9784004310938") == "4004310938"

    def test_check_digit_x(self):
        """チェックディジットが10なら X"""
        assert to_isbn10("9784000000116") == "400000011X"

    def test_hyphens_are_ignored(self):
        """ハイフン付きでも変換できること"""
        assert to_isbn10("978-4-00-431093-8") == "4004310938"

    def test_979_prefix_is_unconvertible(self):
        """979 で始まる ISBN は変換不可"""
        assert to_isbn10("9790000000001") == ""

    def test_wrong_length_is_unconvertible(self):
        """13桁でなければ変換不可"""
        assert to_isbn10("978400431093") == ""
        assert to_isbn10("97840043109381") == ""
        assert to_isbn10("") == ""

    def test_non_digit_is_unconvertible(self):
        """数字以外を含むと変換不可"""
        assert to_isbn10("978400431093X") == ""
