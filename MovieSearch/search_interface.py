from typing import Iterable, Union


class Index:
    def __init__(self):
        pass

    def index_documents(self, documents: Iterable[Union[dict, tuple]]):
        raise NotImplementedError()

    def get_document(self, doc_id: str) -> dict:
        raise NotImplementedError()


class SearchEngine:
    def __init__(self, index: Index):
        self.index = index

    def search(self, query: str) -> list:
        raise NotImplementedError()
